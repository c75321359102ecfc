"""Tests for the README scaffold generator."""

from dev_toolkit.commands import readme

from .conftest import FakePrompter, output_of

LICENSE_SECTION = "## License\n\nThis project is licensed under the MIT License.\n\n"


class TestGenerateReadme:
    """Verify template rendering."""

    def test_minimal(self) -> None:
        """Minimal output has title, description and license only."""
        text = readme.generate_readme("Proj", "Does things.", license="MIT", minimal=True)
        assert text == "# Proj\n\nDoes things.\n\n" + LICENSE_SECTION

    def test_no_license(self) -> None:
        """License 'None' omits the license section."""
        text = readme.generate_readme("Proj", "Does things.", license="None")
        assert text == "# Proj\n\nDoes things.\n\n"

    def test_installation_commands_become_bash_block(self) -> None:
        """Command-looking installation steps are fenced and '$' is stripped."""
        text = readme.generate_readme("Proj", "Desc", installation="$ npm install\n\nnpm run build", license="MIT")
        assert "## Table of Contents\n\n- [Installation](#installation)\n- [License](#license)\n\n" in text
        assert "## Installation\n\n```bash\nnpm install\nnpm run build\n```\n\n" in text
        assert text.endswith(LICENSE_SECTION)

    def test_usage_code_is_javascript(self) -> None:
        """Usage starting with a code keyword is fenced as javascript."""
        text = readme.generate_readme("Proj", "Desc", usage="import x from 'y'\nx()", license="None")
        assert "## Usage\n\n```javascript\nimport x from 'y'\nx()\n```\n\n" in text
        assert "- [Usage](#usage)\n" in text
        assert "- [License]" not in text

    def test_usage_commands_are_bash(self) -> None:
        """Usage commands that are not code are fenced as bash."""
        text = readme.generate_readme("Proj", "Desc", usage="npx proj --help", license="None")
        assert "```bash\nnpx proj --help\n```" in text

    def test_plain_text_is_not_fenced(self) -> None:
        """Prose sections are emitted line by line without blank lines."""
        text = readme.generate_readme("Proj", "Desc", usage="Open the app.\n\nClick start.", license="None")
        assert "## Usage\n\nOpen the app.\nClick start.\n\n" in text
        assert "```" not in text

    def test_existing_markdown_fences_used_as_is(self) -> None:
        """Content that already has fences is copied verbatim."""
        usage = "Run:\n\n```sh\nmake\n```"
        text = readme.generate_readme("Proj", "Desc", usage=usage, license="None")
        assert f"## Usage\n\n{usage}\n\n" in text

    def test_minimal_suppresses_table_of_contents(self) -> None:
        """Minimal mode never renders a table of contents."""
        text = readme.generate_readme("Proj", "Desc", installation="npm i proj", minimal=True)
        assert "Table of Contents" not in text


class TestReadmeCommand:
    """Verify the interactive flow and file handling."""

    def test_writes_readme(self, tmp_path, console) -> None:
        """Answers should be rendered into README.md."""
        prompter = FakePrompter(["  Proj ", "A tool.", "npm install proj\n", "", "MIT"])
        path = readme.readme_command(prompter, base_dir=tmp_path, console=console)
        assert path == tmp_path / "README.md"
        text = path.read_text(encoding="utf-8")
        assert text.startswith("# Proj\n\nA tool.\n\n")
        assert "```bash\nnpm install proj\n```" in text
        assert "## Usage" not in text
        assert "generated successfully" in output_of(console)

    def test_minimal_asks_fewer_questions(self, tmp_path, console) -> None:
        """Minimal mode skips both editor prompts."""
        prompter = FakePrompter(["Proj", "Desc", "ISC"])
        readme.readme_command(prompter, minimal=True, base_dir=tmp_path, console=console)
        assert [kind for kind, _message in prompter.calls] == ["text", "text", "select"]
        assert "ISC License" in (tmp_path / "README.md").read_text(encoding="utf-8")

    def test_no_install_skips_installation_prompt(self, tmp_path, console) -> None:
        """--no-install keeps only the usage editor."""
        prompter = FakePrompter(["Proj", "Desc", "Use it.", "MIT"])
        readme.readme_command(prompter, no_install=True, base_dir=tmp_path, console=console)
        assert [kind for kind, _message in prompter.calls] == ["text", "text", "editor", "select"]

    def test_declined_overwrite_keeps_file(self, tmp_path, console) -> None:
        """Refusing to overwrite leaves the existing README alone."""
        existing = tmp_path / "README.md"
        existing.write_text("keep\n", encoding="utf-8")
        prompter = FakePrompter([False])
        assert readme.readme_command(prompter, base_dir=tmp_path, console=console) is None
        assert existing.read_text(encoding="utf-8") == "keep\n"
        assert "Operation cancelled" in output_of(console)

    def test_custom_output_creates_directories(self, tmp_path, console) -> None:
        """A nested output path gets its parent directories created."""
        prompter = FakePrompter(["Proj", "Desc", "None"])
        path = readme.readme_command(prompter, output="docs/guide/README.md", minimal=True, base_dir=tmp_path, console=console)
        assert path == (tmp_path / "docs" / "guide" / "README.md").resolve()
        assert path.read_text(encoding="utf-8") == "# Proj\n\nDesc\n\n"

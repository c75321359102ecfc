"""Tests for the argparse entry point and its exit codes."""

import pytest

from dev_toolkit import cli
from dev_toolkit.commands import commit
from dev_toolkit.errors import PromptAborted


@pytest.fixture(autouse=True)
def in_tmp(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("DEV_TOOLKIT_ENV_FILE", "DEV_TOOLKIT_LOG_LEVEL", "DEV_TOOLKIT_HISTORY_FILE"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


class TestEnvCommands:
    """Verify the env sub-commands through main()."""

    def test_set_then_get(self, in_tmp, capsys) -> None:
        """A value set through the CLI can be read back raw."""
        assert cli.main(["env", "set", "API_URL", "https://example.com"]) == 0
        capsys.readouterr()
        assert cli.main(["env", "get", "API_URL"]) == 0
        assert capsys.readouterr().out == "https://example.com\n"

    def test_invalid_key_exits_nonzero(self, in_tmp, capsys) -> None:
        """Validation errors exit with status 1."""
        assert cli.main(["env", "set", "BAD KEY", "1"]) == 1
        assert "Key cannot contain spaces" in capsys.readouterr().err
        assert not (in_tmp / ".env").exists()

    def test_get_missing_file_exits_nonzero(self, in_tmp) -> None:
        """A missing .env is a failure and is not created."""
        assert cli.main(["env", "get", "A"]) == 1
        assert not (in_tmp / ".env").exists()

    def test_prod_flag_creates_file_but_fails(self, in_tmp) -> None:
        """--prod creates .env.production and still reports the key missing."""
        assert cli.main(["env", "get", "A", "--prod"]) == 1
        assert (in_tmp / ".env.production").exists()

    def test_dev_flag_targets_development_file(self, in_tmp) -> None:
        """--dev writes to .env.development."""
        assert cli.main(["env", "set", "DEBUG", "true", "--dev"]) == 0
        assert (in_tmp / ".env.development").read_text() == "DEBUG=true\n"

    def test_delete_and_list(self, in_tmp, capsys) -> None:
        """Delete rewrites the file; list shows the remaining keys."""
        (in_tmp / ".env").write_text("# app\nA=1\nB=2\n")
        assert cli.main(["env", "delete", "A"]) == 0
        assert (in_tmp / ".env").read_text() == "# app\nB=2\n"
        assert cli.main(["env", "list"]) == 0
        assert "B = 2" in capsys.readouterr().out

    def test_config_changes_default_env_file(self, in_tmp) -> None:
        """The project config can point at a different default env file."""
        (in_tmp / ".devtoolkit.json").write_text('{"env_file": ".env.local"}')
        assert cli.main(["env", "set", "A", "1"]) == 0
        assert (in_tmp / ".env.local").read_text() == "A=1\n"
        assert not (in_tmp / ".env").exists()

    def test_switch(self, in_tmp) -> None:
        """switch copies the named file over .env."""
        (in_tmp / ".env.production").write_text("MODE=prod\n")
        assert cli.main(["env", "switch", ".env.production"]) == 0
        assert (in_tmp / ".env").read_text() == "MODE=prod\n"

    def test_prod_and_dev_are_exclusive(self) -> None:
        """argparse rejects --prod together with --dev."""
        with pytest.raises(SystemExit):
            cli.main(["env", "list", "--prod", "--dev"])


class TestOtherCommands:
    """Verify wiring of the remaining sub-commands."""

    def test_clean_dry_run(self, in_tmp) -> None:
        """A dry run exits cleanly and keeps the files."""
        (in_tmp / "debug.log").write_text("x")
        assert cli.main(["clean", "--dry-run"]) == 0
        assert (in_tmp / "debug.log").exists()

    def test_clean_missing_path(self, in_tmp) -> None:
        """A missing path exits with status 1."""
        assert cli.main(["clean", str(in_tmp / "nope")]) == 1

    def test_api_invalid_url(self, in_tmp) -> None:
        """Invalid URLs exit with status 1."""
        assert cli.main(["api", "request", "GET", "not-a-url"]) == 1

    def test_api_method_is_case_insensitive(self, in_tmp, monkeypatch) -> None:
        """Methods are upper-cased before validation."""
        seen = {}

        def fake_request(method, url, **kwargs):
            seen["method"] = method

        monkeypatch.setattr(cli.apitest, "request_command", fake_request)
        assert cli.main(["api", "request", "post", "https://example.com"]) == 0
        assert seen["method"] == "POST"

    def test_api_history_clear(self, in_tmp) -> None:
        """history --clear works without prompting."""
        (in_tmp / ".apiteset-history.json").write_text("[]")
        assert cli.main(["api", "history", "--clear"]) == 0
        assert not (in_tmp / ".apiteset-history.json").exists()

    def test_prompt_abort_exits_zero(self, monkeypatch) -> None:
        """Cancelling a prompt is not an error."""

        def cancelled(*args, **kwargs):
            raise PromptAborted("bye")

        monkeypatch.setattr(commit, "commit_command", cancelled)
        assert cli.main(["commit"]) == 0

    def test_invalid_config_exits_nonzero(self, in_tmp) -> None:
        """Broken configuration is reported as a failure."""
        (in_tmp / ".devtoolkit.yaml").write_text("history_limit: -1\n")
        assert cli.main(["env", "list"]) == 1

"""Command line interface for dev-toolkit."""

from __future__ import annotations

import argparse
import logging
import pathlib
import sys
from typing import List, Optional

from rich.markup import escape

from . import __version__
from .commands import apitest, cleaner, commit, envset, readme
from .errors import PromptAborted, ToolkitError
from .history import HistoryStore
from .logging_utils import configure_logging, err_console
from .prompts import ConsolePrompter
from .settings import ToolkitSettings, load_settings

logger = logging.getLogger(__name__)


def _add_env_file_flags(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--file", help="Name of the env file to edit (default: .env or DEV_TOOLKIT_ENV_FILE)")
    group.add_argument("--prod", action="store_true", help="Use .env.production")
    group.add_argument("--dev", action="store_true", help="Use .env.development")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dev-toolkit", description="Developer workflow utilities")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Python logging level (e.g. INFO, DEBUG). Defaults to WARNING.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    commit_parser = sub.add_parser("commit", help="Compose a conventional commit message")
    commit_parser.add_argument("--push", action="store_true", help="Stage, commit and push with the message")

    readme_parser = sub.add_parser("readme", help="Generate a README.md scaffold")
    readme_parser.add_argument("--no-install", action="store_true", help="Skip the installation section")
    readme_parser.add_argument("--minimal", action="store_true", help="Only name, description and license")
    readme_parser.add_argument("-o", "--output", help="Output path (default: README.md)")

    env_parser = sub.add_parser("env", help="Edit .env files")
    env_sub = env_parser.add_subparsers(dest="env_command", required=True)
    env_set = env_sub.add_parser("set", help="Add or update a key")
    env_set.add_argument("key")
    env_set.add_argument("value")
    _add_env_file_flags(env_set)
    env_get = env_sub.add_parser("get", help="Print the raw value of a key")
    env_get.add_argument("key")
    _add_env_file_flags(env_get)
    env_list = env_sub.add_parser("list", help="List keys with a value preview")
    _add_env_file_flags(env_list)
    env_delete = env_sub.add_parser("delete", help="Remove a key")
    env_delete.add_argument("key")
    _add_env_file_flags(env_delete)
    env_switch = env_sub.add_parser("switch", help="Copy an env file over .env")
    env_switch.add_argument("env_file", help="e.g. .env.production")

    clean_parser = sub.add_parser("clean", help="Remove build output, caches and junk files")
    clean_parser.add_argument("path", nargs="?", default=None, help="Project directory (default: cwd)")
    clean_parser.add_argument("--node-modules", action="store_true", help="Only remove node_modules directories")
    clean_parser.add_argument("-f", "--force", action="store_true", help="Do not ask for confirmation")
    clean_parser.add_argument("--dry-run", action="store_true", help="Only show what would be deleted")

    api_parser = sub.add_parser("api", help="Send HTTP requests and browse history")
    api_sub = api_parser.add_subparsers(dest="api_command", required=True)
    api_request = api_sub.add_parser("request", help="Send a request")
    api_request.add_argument("method", type=str.upper, choices=apitest.METHODS)
    api_request.add_argument("url")
    api_request.add_argument("-H", "--header", dest="headers", action="append", default=[], help="Header 'Key: Value'")
    api_request.add_argument("-d", "--body", help="Request body (JSON)")
    api_request.add_argument("-e", "--editor", action="store_true", help="Write the body in $EDITOR")
    api_request.add_argument("--no-history", action="store_true", help="Do not record this request")
    api_request.add_argument("-i", "--interactive-headers", action="store_true", help="Prompt for common headers")
    api_history = api_sub.add_parser("history", help="Browse, view or replay past requests")
    api_history.add_argument("--clear", action="store_true", help="Delete the history file")

    return parser


def _env_file(args: argparse.Namespace, settings: ToolkitSettings) -> str:
    return envset.select_env_file(args.file or settings.env_file, prod=args.prod, dev=args.dev)


def _run_env(args: argparse.Namespace, settings: ToolkitSettings, base_dir: pathlib.Path) -> None:
    if args.env_command == "switch":
        envset.switch_command(args.env_file, base_dir=base_dir)
        return
    env_file = _env_file(args, settings)
    if args.env_command == "set":
        envset.set_command(args.key, args.value, env_file=env_file, base_dir=base_dir)
    elif args.env_command == "get":
        envset.get_command(args.key, env_file=env_file, base_dir=base_dir)
    elif args.env_command == "list":
        envset.list_command(env_file=env_file, base_dir=base_dir)
    elif args.env_command == "delete":
        envset.delete_command(args.key, env_file=env_file, base_dir=base_dir)


def _run_api(args: argparse.Namespace, settings: ToolkitSettings, base_dir: pathlib.Path, prompter: ConsolePrompter) -> None:
    history = HistoryStore.in_directory(base_dir, settings.history_file, settings.history_limit)
    if args.api_command == "request":
        apitest.request_command(
            args.method,
            args.url,
            headers=args.headers,
            body=args.body,
            editor=args.editor,
            no_history=args.no_history,
            interactive_headers=args.interactive_headers,
            prompter=prompter,
            history=history,
            timeout=settings.request_timeout,
        )
    elif args.api_command == "history":
        apitest.history_command(prompter, clear=args.clear, history=history, timeout=settings.request_timeout)


def run(args: argparse.Namespace, base_dir: Optional[pathlib.Path] = None) -> None:
    base_dir = base_dir or pathlib.Path.cwd()
    settings = load_settings(base_dir)
    configure_logging(args.log_level or settings.log_level)
    prompter = ConsolePrompter(editor_command=settings.editor)
    logger.debug("Running %s in %s", args.command, base_dir)

    if args.command == "commit":
        commit.commit_command(prompter, push=args.push)
    elif args.command == "readme":
        readme.readme_command(
            prompter,
            output=args.output,
            no_install=args.no_install,
            minimal=args.minimal,
            base_dir=base_dir,
        )
    elif args.command == "env":
        _run_env(args, settings, base_dir)
    elif args.command == "clean":
        cleaner.clean_command(
            args.path or base_dir,
            prompter,
            node_modules=args.node_modules,
            force=args.force,
            dry_run=args.dry_run,
        )
    elif args.command == "api":
        _run_api(args, settings, base_dir, prompter)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        run(args)
    except PromptAborted as exc:
        logger.debug("Aborted: %s", exc)
        return exc.exit_code
    except ToolkitError as exc:
        err_console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return exc.exit_code
    except OSError as exc:
        err_console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

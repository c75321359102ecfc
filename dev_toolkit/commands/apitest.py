"""
Minimal HTTP request tester with a local history log.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

import httpx
from rich.console import Console
from rich.markup import escape

from ..errors import FormatError, ToolkitError
from ..history import ApiResponse, HistoryEntry, HistoryStore
from ..logging_utils import console as default_console, err_console, status_style
from ..prompts import Prompter

logger = logging.getLogger(__name__)

METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})
JSON_CONTENT_TYPE = "application/json"
DEFAULT_TIMEOUT = 30.0


def format_json(data: str) -> str:
    """Pretty-print ``data`` if it is JSON, otherwise return it unchanged."""
    try:
        parsed = json.loads(data)
    except (TypeError, ValueError):
        return data
    return json.dumps(parsed, indent=2, ensure_ascii=False)


def parse_headers(header_strings: Iterable[str]) -> Dict[str, str]:
    """Turn ``["Key: Value", ...]`` into a dict; entries without ``:`` are skipped."""
    headers: Dict[str, str] = {}
    for header in header_strings:
        name, sep, value = header.partition(":")
        if not sep:
            logger.debug("Skipping malformed header %r", header)
            continue
        headers[name.strip()] = value.strip()
    return headers


def validate_url(url: str) -> httpx.URL:
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise FormatError("Invalid URL.") from exc
    if parsed.scheme not in {"http", "https"} or not parsed.host:
        raise FormatError("Invalid URL.")
    return parsed


def validate_json_body(body: str) -> None:
    try:
        json.loads(body)
    except ValueError as exc:
        raise FormatError("Invalid JSON in request body.") from exc


def _has_header(headers: Dict[str, str], name: str) -> bool:
    return any(key.lower() == name.lower() for key in headers)


def _collect_headers(response: httpx.Response) -> Dict[str, str]:
    collected: Dict[str, List[str]] = {}
    for name, value in response.headers.multi_items():
        collected.setdefault(name, []).append(value)
    return {name: ", ".join(values) for name, values in collected.items()}


def make_request(
    method: str,
    url: str,
    headers: Optional[Dict[str, str]] = None,
    body: Optional[str] = None,
    client: Optional[httpx.Client] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> ApiResponse:
    """
    Issue one request and return the decoded response.

    POST/PUT/PATCH requests carrying a body default to a JSON content type.
    Transport failures are raised as :class:`ToolkitError`.
    """
    method = method.upper()
    request_headers = dict(headers or {})
    if method in BODY_METHODS and body and not _has_header(request_headers, "Content-Type"):
        request_headers["Content-Type"] = JSON_CONTENT_TYPE

    owns_client = client is None
    http_client = client or httpx.Client(timeout=timeout)
    try:
        response = http_client.request(
            method,
            url,
            headers=request_headers,
            content=body.encode("utf-8") if body else None,
        )
    except httpx.HTTPError as exc:
        raise ToolkitError(f"Error making request: {exc}") from exc
    finally:
        if owns_client:
            http_client.close()

    logger.debug("%s %s -> %s", method, url, response.status_code)
    return ApiResponse(
        status=response.status_code,
        status_text=response.reason_phrase,
        headers=_collect_headers(response),
        body=response.text,
    )


def _prompt_headers(prompter: Prompter, headers: Dict[str, str]) -> None:
    if prompter.confirm("Add Content-Type: application/json header?", default=True):
        headers["Content-Type"] = JSON_CONTENT_TYPE
    authorization = prompter.text("Authorization header (Bearer token, Basic auth, etc.) [optional]:").strip()
    if authorization:
        headers["Authorization"] = authorization
    custom = prompter.text("Add custom header (format: Key:Value) [optional, press Enter to skip]:")
    parts = custom.split(":")
    if len(parts) == 2 and parts[0].strip():
        headers[parts[0].strip()] = parts[1].strip()


def request_command(
    method: str,
    url: str,
    headers: Optional[List[str]] = None,
    body: Optional[str] = None,
    editor: bool = False,
    no_history: bool = False,
    interactive_headers: bool = False,
    prompter: Optional[Prompter] = None,
    client: Optional[httpx.Client] = None,
    history: Optional[HistoryStore] = None,
    timeout: float = DEFAULT_TIMEOUT,
    console: Optional[Console] = None,
) -> ApiResponse:
    console = console or default_console
    method = method.upper()
    if method not in METHODS:
        raise FormatError(f"Unsupported method {method}. Use one of: {', '.join(METHODS)}.")
    validate_url(url)

    request_headers = parse_headers(headers or [])
    if interactive_headers:
        if prompter is None:
            raise ToolkitError("Interactive headers need a prompter.")
        _prompt_headers(prompter, request_headers)

    request_body = body
    if method in BODY_METHODS:
        if editor:
            if prompter is None:
                raise ToolkitError("Editor input needs a prompter.")
            request_body = prompter.editor("Enter request body (JSON):", default=request_body or "{}")
            validate_json_body(request_body)
        elif request_body:
            validate_json_body(request_body)

    console.print(f"[blue]\n{method} {escape(url)}\n[/blue]")
    response = make_request(method, url, request_headers, request_body, client=client, timeout=timeout)

    style = status_style(response.status)
    console.print(f"[{style}]Status: {response.status} {escape(response.status_text)}[/{style}]")
    console.print("[cyan]\nResponse Body:[/cyan]")
    console.print(format_json(response.body), markup=False)
    console.print()

    if not no_history:
        store = history or HistoryStore.in_directory()
        entry = HistoryEntry(
            method=method,
            url=url,
            headers=request_headers or None,
            body=request_body,
            response=response,
        )
        if not store.append(entry):
            err_console.print("[yellow]Warning: Could not save to history[/yellow]")
    return response


def _local_time(timestamp: str) -> str:
    try:
        return datetime.fromisoformat(timestamp).astimezone().strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return timestamp


def format_history_entry(entry: HistoryEntry, index: int) -> str:
    """One-line rich-markup summary; ``index`` is the 0-based position in the file."""
    style = status_style(entry.response.status)
    return (
        f"[bright_black]{index + 1}.[/bright_black] [cyan]{entry.method}[/cyan] {escape(entry.url)} "
        f"[{style}]\\[{entry.response.status}][/{style}] [bright_black]({_local_time(entry.timestamp)})[/bright_black]"
    )


def _print_details(console: Console, entry: HistoryEntry) -> None:
    console.print("[cyan]\nRequest Details:\n[/cyan]")
    console.print(f"[yellow]Method:[/yellow] {entry.method}")
    console.print(f"[yellow]URL:[/yellow] {escape(entry.url)}")
    if entry.headers:
        console.print("[yellow]Headers:[/yellow]")
        for name, value in entry.headers.items():
            console.print(f"[bright_black]  {escape(name)}: {escape(value)}[/bright_black]")
    if entry.body:
        console.print("[yellow]Body:[/yellow]")
        console.print(format_json(entry.body), markup=False)
    console.print("[yellow]\nResponse:[/yellow]")
    console.print(f"[green]Status: {entry.response.status} {escape(entry.response.status_text)}[/green]")
    console.print("[yellow]Body:[/yellow]")
    console.print(format_json(entry.response.body), markup=False)
    console.print()


def history_command(
    prompter: Prompter,
    clear: bool = False,
    history: Optional[HistoryStore] = None,
    client: Optional[httpx.Client] = None,
    timeout: float = DEFAULT_TIMEOUT,
    console: Optional[Console] = None,
) -> None:
    console = console or default_console
    store = history or HistoryStore.in_directory()

    if clear:
        if store.clear():
            console.print("[green]✓ History cleared.[/green]")
        else:
            console.print("[yellow]History file does not exist.[/yellow]")
        return

    entries = store.load()
    if not entries:
        console.print("[yellow]No history found.[/yellow]")
        return

    console.print(f"[cyan]\nAPI Request History ({len(entries)} entries):\n[/cyan]")
    newest_first = list(reversed(range(len(entries))))
    for index in newest_first:
        console.print(format_history_entry(entries[index], index))
    console.print()

    action = prompter.select(
        "What would you like to do?",
        [
            ("View details of a request", "view"),
            ("Replay a request", "replay"),
            ("Exit", "exit"),
        ],
    )
    if action == "exit":
        return

    choices = [
        (f"{index + 1}. {entries[index].method} {entries[index].url} [{entries[index].response.status}]", str(index))
        for index in newest_first
    ]
    selected = entries[int(prompter.select("Select a request:", choices))]

    if action == "view":
        _print_details(console, selected)
        return

    replay_headers = [f"{name}: {value}" for name, value in (selected.headers or {}).items()]
    request_command(
        selected.method,
        selected.url,
        headers=replay_headers,
        body=selected.body,
        prompter=prompter,
        client=client,
        history=store,
        timeout=timeout,
        console=console,
    )

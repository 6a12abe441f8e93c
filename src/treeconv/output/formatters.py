"""Human and JSON rendering of ServiceResult."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from treeconv.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from treeconv.services.result import ServiceResult


def _format_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    console.print(Text(f"  {key}: ", style="tc.key"), Text(_format_value(value)), sep="", soft_wrap=True)


def _types_table(types: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Name", style="tc.name", no_wrap=True)
    table.add_column("Kind")
    table.add_column("Qualname", style="dim")
    for item in types:
        kind = str(item.get("kind", ""))
        table.add_row(
            str(item.get("name", "")),
            Text(kind, style=f"tc.kind.{kind}" if kind else ""),
            str(item.get("qualname", "")),
        )
    return table


def _render_error(result: ServiceResult, console: Console) -> None:
    err = result.error
    message = err.message if err else "unknown error"
    line = Text.assemble(
        ("ERROR", "tc.error"),
        ": ",
        (result.op, "tc.op"),
        f": {message}",
    )
    if err is not None:
        line.append(f" [{err.code}]", style="tc.code")
    console.print(line, soft_wrap=True)


def _render_success(result: ServiceResult, console: Console) -> None:
    console.print(Text.assemble(("OK", "tc.ok"), ": ", (result.op, "tc.op")), soft_wrap=True)
    for key, value in result.data.items():
        if key == "types":
            console.print(_types_table(value))
        else:
            _field(console, key, value)


def format_result(result: ServiceResult, *, json_output: bool = False, quiet: bool = False) -> str:
    """Render *result* for the terminal.

    JSON mode dumps the whole result. In human mode a rendered document is
    printed verbatim so it can be piped; *quiet* drops the key/value
    summary of other successful results. Everything else goes through a
    Rich console.
    """
    if json_output:
        return result.model_dump_json(indent=2)

    if result.ok:
        document = result.data.get("document")
        if isinstance(document, str):
            return document.rstrip("\n")
        if quiet:
            return ""

    console = create_console()
    if result.ok:
        _render_success(result, console)
    else:
        _render_error(result, console)
    return get_output(console).rstrip("\n")

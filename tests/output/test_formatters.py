"""Tests for ServiceResult formatting."""

import json

from treeconv.output.console import create_console, get_output
from treeconv.output.formatters import format_result
from treeconv.services.result import ServiceResult


class TestFormatResult:
    def test_json_output(self) -> None:
        result = ServiceResult(ok=True, op="check", data={"valid": True})
        parsed = json.loads(format_result(result, json_output=True))
        assert parsed["ok"] is True
        assert parsed["data"] == {"valid": True}

    def test_human_success(self) -> None:
        result = ServiceResult(ok=True, op="check", data={"type": "Stance", "valid": True})
        assert format_result(result) == "OK: check\n  type: Stance\n  valid: True"

    def test_human_nested_values_compact(self) -> None:
        result = ServiceResult(ok=True, op="x", data={"path": [0, "n"]})
        assert '  path: [0,"n"]' in format_result(result)

    def test_document_printed_verbatim(self) -> None:
        result = ServiceResult(ok=True, op="convert", data={"document": "a: 1\n", "format": "yaml"})
        assert format_result(result) == "a: 1"
        assert format_result(result, quiet=True) == "a: 1"

    def test_quiet_success_is_empty(self) -> None:
        result = ServiceResult(ok=True, op="check", data={"valid": True})
        assert format_result(result, quiet=True) == ""

    def test_types_table(self) -> None:
        result = ServiceResult(
            ok=True,
            op="types",
            data={
                "types": [
                    {"name": "int", "kind": "scalar", "qualname": "int"},
                    {"name": "Stance", "kind": "aggregate", "qualname": "treeconv.domain.contact.Stance"},
                ],
                "count": 2,
            },
        )
        lines = format_result(result).splitlines()
        assert lines[0] == "OK: types"
        assert any("Name" in line and "Kind" in line and "Qualname" in line for line in lines)
        assert any("int" in line and "scalar" in line for line in lines)
        assert any(
            "Stance" in line and "aggregate" in line and "treeconv.domain.contact.Stance" in line
            for line in lines
        )
        assert lines[-1] == "  count: 2"

    def test_human_error(self) -> None:
        result = ServiceResult.failure("check", "MISSING_FIELD", "[0]: missing required field 'link'")
        assert format_result(result) == (
            "ERROR: check: [0]: missing required field 'link' [MISSING_FIELD]"
        )

    def test_error_brackets_not_markup(self) -> None:
        result = ServiceResult.failure("check", "TYPE_MISMATCH", "[bold]x[/bold]: expected int")
        assert "[bold]x[/bold]: expected int [TYPE_MISMATCH]" in format_result(result)

    def test_long_error_not_wrapped(self) -> None:
        message = "a" * 300
        result = ServiceResult.failure("check", "STREAM_ERROR", message)
        assert len(format_result(result).splitlines()) == 1


class TestConsole:
    def test_renders_to_buffer(self) -> None:
        console = create_console(no_color=True)
        console.print("hello")
        assert get_output(console) == "hello\n"

"""Tests for ConverterRegistry registration, lookup, and resolution."""

from __future__ import annotations

from enum import Enum
from typing import Any

import pytest

from treeconv.conversion.registry import ConverterRegistry
from treeconv.domain.errors import MissingField, TypeMismatch, UnresolvableType
from treeconv.domain.geometry import Vector3
from treeconv.domain.tree import Node, Record, Scalar


class Marker:
    pass


def _encode_marker(value: Marker, registry: ConverterRegistry) -> Node:
    return Scalar("marker")


def _decode_marker(node: Node, registry: ConverterRegistry) -> Marker:
    return Marker()


class TestRegister:
    def test_register_and_names(self) -> None:
        registry = ConverterRegistry()
        registry.register(Marker, encode=_encode_marker, decode=_decode_marker)
        assert registry.registered_names() == {"Marker": Marker}
        assert len(registry) == 1

    def test_custom_name(self) -> None:
        registry = ConverterRegistry()
        registry.register(Marker, encode=_encode_marker, decode=_decode_marker, name="mark")
        assert registry.lookup("mark") is Marker

    def test_duplicate_type(self) -> None:
        registry = ConverterRegistry()
        registry.register(Marker, encode=_encode_marker, decode=_decode_marker)
        with pytest.raises(ValueError, match="already registered"):
            registry.register(Marker, encode=_encode_marker, decode=_decode_marker, name="other")

    def test_scalar_name_reserved(self) -> None:
        with pytest.raises(ValueError, match="already in use"):
            ConverterRegistry().register(
                Marker, encode=_encode_marker, decode=_decode_marker, name="float"
            )

    def test_non_class(self) -> None:
        with pytest.raises(TypeError):
            ConverterRegistry().register(
                list[int],  # type: ignore[arg-type]
                encode=_encode_marker,
                decode=_decode_marker,
            )

    def test_copy_is_independent(self, registry: ConverterRegistry) -> None:
        clone = registry.copy()
        clone.register(Marker, encode=_encode_marker, decode=_decode_marker)
        assert "Marker" in clone.registered_names()
        assert "Marker" not in registry.registered_names()
        assert "Stance" in clone.registered_names()


class TestLookup:
    def test_scalars(self, registry: ConverterRegistry) -> None:
        assert registry.lookup("float") is float
        assert registry.lookup(" int ") is int

    def test_registered(self, registry: ConverterRegistry) -> None:
        assert registry.lookup("Vector3") is Vector3

    def test_nested(self, registry: ConverterRegistry) -> None:
        assert registry.lookup("list[Vector3]") == list[Vector3]
        assert registry.lookup("dict[list[float]]") == dict[str, list[float]]

    def test_unknown(self, registry: ConverterRegistry) -> None:
        with pytest.raises(KeyError, match="Unknown type name 'Nope'"):
            registry.lookup("list[Nope]")


class TestResolve:
    def test_memoised(self, registry: ConverterRegistry) -> None:
        first = registry.resolve(list[Vector3])
        assert registry.resolve(list[Vector3]) is first
        assert first.rule == "sequence"

    def test_register_clears_memo(self) -> None:
        registry = ConverterRegistry()
        with pytest.raises(UnresolvableType):
            registry.resolve(list[Marker])
        registry.register(Marker, encode=_encode_marker, decode=_decode_marker)
        assert registry.resolve(list[Marker]).rule == "sequence"

    @pytest.mark.parametrize(
        ("target", "rule"),
        [
            (Vector3, "registered"),
            (int | None, "optional"),
            (tuple[float, ...], "sequence"),
            (dict[str, int], "mapping"),
            (Enum("Color", "RED GREEN"), "enum"),
            (str, "scalar"),
            (Any, "dynamic"),
        ],
    )
    def test_rules(self, registry: ConverterRegistry, target: Any, rule: str) -> None:
        assert registry.resolve(target).rule == rule

    @pytest.mark.parametrize("target", [set[int], dict[int, str], tuple[int, str], Marker, int | str])
    def test_unresolvable(self, registry: ConverterRegistry, target: Any) -> None:
        with pytest.raises(UnresolvableType):
            registry.resolve(target)

    def test_encode_defaults_to_runtime_type(self, registry: ConverterRegistry) -> None:
        assert registry.encode(Vector3(x=1.0)) == registry.encode(Vector3(x=1.0), Vector3)


class TestDecodeField:
    def test_present(self, registry: ConverterRegistry) -> None:
        record = Record({"a": Scalar(2)})
        assert registry.decode_field(record, "a", float) == 2.0

    def test_absent_with_default(self, registry: ConverterRegistry) -> None:
        assert registry.decode_field(Record(), "a", int, 7) == 7

    def test_absent_without_default(self, registry: ConverterRegistry) -> None:
        with pytest.raises(MissingField) as exc_info:
            registry.decode_field(Record(), "a", int)
        assert exc_info.value.path == ()

    def test_failure_annotated_with_key(self, registry: ConverterRegistry) -> None:
        with pytest.raises(TypeMismatch) as exc_info:
            registry.decode_field(Record({"a": Scalar("x")}), "a", int)
        assert exc_info.value.path == ("a",)

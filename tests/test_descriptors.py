"""Tests for the field and method descriptor parser."""

from __future__ import annotations

import pytest

from classy.analyzers.descriptors import (
    MethodDescriptor,
    parse_field_descriptor,
    parse_method_descriptor,
)
from classy.core.errors import DescriptorSyntaxError


@pytest.mark.parametrize(
    ("descriptor", "expected"),
    [
        ("B", "byte"),
        ("C", "char"),
        ("D", "double"),
        ("F", "float"),
        ("I", "int"),
        ("J", "long"),
        ("S", "short"),
        ("Z", "boolean"),
        ("Ljava/lang/String;", "java.lang.String"),
        ("LFoo;", "Foo"),
        ("[[I", "int[][]"),
        ("[Ljava/util/Map$Entry;", "java.util.Map$Entry[]"),
    ],
)
def test_field_descriptors(descriptor: str, expected: str) -> None:
    assert parse_field_descriptor(descriptor) == expected


def test_method_descriptor() -> None:
    params, ret = parse_method_descriptor("(IFLjava/lang/Object;)Z")
    assert params == ["int", "float", "java.lang.Object"]
    assert ret == "boolean"


@pytest.mark.parametrize(
    ("descriptor", "expected"),
    [
        ("()V", MethodDescriptor([], "void")),
        ("([Ljava/lang/String;)V", MethodDescriptor(["java.lang.String[]"], "void")),
        ("(J[[DLx/Y;)[I", MethodDescriptor(["long", "double[][]", "x.Y"], "int[]")),
    ],
)
def test_more_method_descriptors(descriptor: str, expected: MethodDescriptor) -> None:
    assert parse_method_descriptor(descriptor) == expected


def test_array_dimension_limit() -> None:
    assert parse_field_descriptor("[" * 255 + "I").endswith("[]" * 255)
    with pytest.raises(DescriptorSyntaxError, match="255"):
        parse_field_descriptor("[" * 256 + "I")


@pytest.mark.parametrize(
    ("descriptor", "position", "reason"),
    [
        ("", 0, "empty"),
        ("Ljava/lang/String", 0, "';'"),
        ("L;", 0, "empty class name"),
        ("Q", 0, "unexpected character"),
        ("V", 0, "return type"),
        ("[V", 1, "return type"),
        ("II", 1, "trailing"),
        ("[", 1, "end of descriptor"),
    ],
    ids=[
        "empty", "unterminated-class", "empty-class", "unknown-lead",
        "void-field", "void-array", "trailing", "dangling-array",
    ],
)
def test_malformed_field_descriptors(descriptor: str, position: int, reason: str) -> None:
    with pytest.raises(DescriptorSyntaxError, match=reason) as excinfo:
        parse_field_descriptor(descriptor)
    assert excinfo.value.descriptor == descriptor
    assert excinfo.value.position == position


@pytest.mark.parametrize(
    ("descriptor", "reason"),
    [
        ("", "empty"),
        ("I)V", "expected '\\('"),
        ("(II", "closing"),
        ("(I)", "end of descriptor"),
        ("(V)V", "return type"),
        ("()VV", "trailing"),
        ("(Ljava/lang/String)V", "';'"),
    ],
    ids=[
        "empty", "missing-open", "missing-close", "missing-return",
        "void-param", "trailing", "unterminated-class",
    ],
)
def test_malformed_method_descriptors(descriptor: str, reason: str) -> None:
    with pytest.raises(DescriptorSyntaxError, match=reason):
        parse_method_descriptor(descriptor)


@pytest.mark.parametrize(
    ("descriptor", "parse", "position"),
    [
        ("La[b;", parse_field_descriptor, 2),
        ("Ljava.lang.String;", parse_field_descriptor, 5),
        ("(LFoo)V;)V", parse_method_descriptor, 5),
        ("(La(b;)V", parse_method_descriptor, 3),
    ],
    ids=["bracket", "dot", "close-paren", "open-paren"],
)
def test_class_name_rejects_structural_characters(descriptor, parse, position) -> None:
    with pytest.raises(DescriptorSyntaxError, match="illegal character") as excinfo:
        parse(descriptor)
    assert excinfo.value.position == position

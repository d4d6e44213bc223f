"""Tests for key path resolution and traversal."""
import pytest

from dhconfig.config.keypath import (
    CANONICAL_SEPARATOR,
    Lookup,
    ValueKind,
    descend,
    join_key,
    kind_of,
    resolve_key,
    split_key,
    step,
    traverse,
)


@pytest.mark.parametrize("raw, delimiter, expected", [
    ("serverSettings.port", ".", "serverSettings:port"),
    ("serverSettings:port", ":", "serverSettings:port"),
    ("serverSettings", ".", "serverSettings"),
    ("a/b/c", "/", "a:b:c"),
    ("a->b", "->", "a:b"),
    # a colon key under another delimiter is already canonical
    ("serverSettings:port", ".", "serverSettings:port"),
])
def test_resolve_key(raw, delimiter, expected):
    assert resolve_key(raw, delimiter) == expected


@pytest.mark.parametrize("raw", [0, None, 1.5, ("a", "b")])
def test_resolve_key_passes_non_strings_through(raw):
    assert resolve_key(raw, ".") == raw


def test_step_with_non_string_key_is_missing():
    assert not step({0: "zero"}, 0).found
    assert not step({"a": 1}, ["a"]).found
    assert not step(["x"], 0).found


def test_resolve_key_is_idempotent():
    once = resolve_key("a.b.c", ".")
    assert resolve_key(once, ".") == once
    assert resolve_key(once, CANONICAL_SEPARATOR) == once


def test_split_and_join():
    assert split_key("a:b:c") == ["a", "b", "c"]
    assert join_key(["a", "b"]) == "a:b"


@pytest.mark.parametrize("value, kind", [
    (None, ValueKind.NULL),
    ({"a": 1}, ValueKind.MAPPING),
    ([1, 2], ValueKind.SEQUENCE),
    ("text", ValueKind.SCALAR),
    (0, ValueKind.SCALAR),
    (False, ValueKind.SCALAR),
])
def test_kind_of(value, kind):
    assert kind_of(value) is kind


def test_traverse_finds_nested_value():
    tree = {"serverSettings": {"port": 3000}}
    found = traverse(tree, ["serverSettings", "port"])
    assert found.found
    assert found.value == 3000


def test_traverse_missing_and_non_mapping():
    tree = {"serverSettings": {"port": 3000}, "features": ["a"]}
    assert not traverse(tree, ["missing", "port"]).found
    assert not traverse(tree, ["serverSettings", "port", "deeper"]).found
    assert not traverse(tree, ["features", "0"]).found


def test_stored_none_is_found():
    found = traverse({"optional": None}, ["optional"])
    assert found.found
    assert found.value is None
    assert found.kind is ValueKind.NULL


def test_missing_unwraps_to_default():
    assert Lookup.missing().unwrap() is None
    assert Lookup.missing().unwrap("fallback") == "fallback"
    assert Lookup.hit(0).unwrap("fallback") == 0


def test_step_requires_mapping():
    assert step({"a": 1}, "a") == Lookup.hit(1)
    assert not step("scalar", "a").found
    assert not step(None, "a").found


def test_descend_uses_literal_keys():
    start = Lookup.hit({"a": {"b": 1}, "a:b": "literal"})
    assert descend(start, ["a", "b"], ".").value == 1
    assert descend(start, ["a.b"], ".").value == "literal"


def test_descend_from_missing_stays_missing():
    assert not descend(Lookup.missing(), ["a", "b"], ".").found


def test_traversal_does_not_mutate_tree():
    tree = {"a": {"b": {"c": 1}}}
    snapshot = {"a": {"b": {"c": 1}}}
    traverse(tree, ["a", "b", "c"])
    traverse(tree, ["a", "x", "y"])
    descend(Lookup.hit(tree), ["a", "nope"], ".")
    assert tree == snapshot

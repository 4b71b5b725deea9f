"""Tests for the generator data model and entry registry."""

import pytest

from docweave.core.generator import (
    Argument,
    EntryRegistry,
    Visibility,
    normalize_type,
)


# =========================================================================
# Tests: Type normalization
# =========================================================================

class TestNormalizeType:
    def test_string_passes_through(self):
        assert normalize_type("int|null") == "int|null"

    def test_list_is_joined(self):
        assert normalize_type(["int", "string"]) == "int|string"

    def test_empty_entries_dropped(self):
        assert normalize_type(["int", "", "null"]) == "int|null"

    @pytest.mark.parametrize("value", [None, "", [], ["", ""]])
    def test_empty_values(self, value):
        assert normalize_type(value) is None


# =========================================================================
# Tests: Argument
# =========================================================================

class TestArgument:
    def test_name_only(self):
        assert Argument("id").build() == "$id"

    def test_typed_with_default(self):
        assert Argument("limit", "int", "10").build() == "int $limit = 10"

    def test_union_type(self):
        assert Argument("value", ["int", "string", ""]).build() == "int|string $value"

    def test_null_default_is_rendered(self):
        assert Argument("value", "?int", "null").build() == "?int $value = null"

    def test_str_matches_build(self):
        argument = Argument("where", "array", "[]")
        assert str(argument) == argument.build()

    def test_immutable(self):
        argument = Argument("id")
        with pytest.raises(Exception):
            argument.name = "other"


# =========================================================================
# Tests: Registry
# =========================================================================

class TestVirtualProperties:
    def test_first_registration_wins(self):
        registry = EntryRegistry()
        registry.add_virtual_property("name", "string", True, True, "first")
        registry.add_virtual_property("name", "int", True, False, "second")

        prop = registry.virtual_properties["name"]
        assert prop.type == "string"
        assert prop.comment == "first"
        assert len(registry.virtual_properties) == 1

    def test_type_normalized_on_add(self):
        registry = EntryRegistry()
        registry.add_virtual_property("tags", ["array", "null"])
        assert registry.virtual_properties["tags"].type == "array|null"

    @pytest.mark.parametrize(
        "readable, writable, expected",
        [
            (True, True, "property"),
            (False, True, "property-write"),
            (True, False, "property-read"),
            (False, False, "property-read"),
        ],
    )
    def test_tag_category(self, readable, writable, expected):
        registry = EntryRegistry()
        registry.add_virtual_property("x", readable=readable, writable=writable)
        assert registry.virtual_properties["x"].tag_name == expected

    def test_chaining(self):
        registry = EntryRegistry()
        result = registry.add_virtual_property("a").add_virtual_property("b")
        assert result is registry
        assert list(registry.virtual_properties) == ["a", "b"]


class TestMethods:
    def test_virtual_method_case_insensitive_duplicate(self):
        registry = EntryRegistry()
        registry.add_virtual_method("where", [Argument("field")], "static")
        registry.add_virtual_method("WHERE", [], "int")

        assert list(registry.virtual_methods) == ["where"]
        assert registry.virtual_methods["where"].return_type == "static"

    def test_declared_method_blocked_by_virtual_method(self):
        registry = EntryRegistry()
        registry.add_virtual_method("Foo")
        registry.add_declared_method("foo", body="return 1;")

        assert registry.declared_methods == {}
        assert "Foo" in registry.virtual_methods

    def test_virtual_method_blocked_by_declared_method(self):
        registry = EntryRegistry()
        registry.add_declared_method("toArray", body="return [];")
        registry.add_virtual_method("toarray")

        assert registry.virtual_methods == {}

    def test_declared_method_defaults(self):
        registry = EntryRegistry()
        registry.add_declared_method("boot", return_type=["void"])

        method = registry.declared_methods["boot"]
        assert method.body == ""
        assert method.return_type == "void"
        assert method.visibility is Visibility.PUBLIC
        assert method.arguments == []

    def test_has_method(self):
        registry = EntryRegistry().add_virtual_method("getName")
        assert registry.has_method("GETNAME")
        assert not registry.has_method("setName")


class TestDeclaredProperties:
    def test_first_registration_wins(self):
        registry = EntryRegistry()
        registry.add_declared_property("table", "string", "'users'", comment="Table")
        registry.add_declared_property("table", "int", "1")

        prop = registry.declared_properties["table"]
        assert prop.default_value == "'users'"
        assert prop.type == "string"

    def test_visibility_from_string(self):
        registry = EntryRegistry()
        registry.add_declared_property("cache", visibility="protected")
        assert registry.declared_properties["cache"].visibility is Visibility.PROTECTED

    def test_properties_and_methods_are_separate_namespaces(self):
        registry = EntryRegistry()
        registry.add_declared_property("name").add_virtual_property("name")
        assert "name" in registry.declared_properties
        assert "name" in registry.virtual_properties


class TestInvalidNames:
    @pytest.mark.parametrize("name", ["first-name", "$name", "", "2fa", "get name", "find()"])
    def test_invalid_names_ignored(self, name):
        registry = (
            EntryRegistry()
            .add_virtual_property(name, "string", True)
            .add_virtual_method(name)
            .add_declared_property(name)
            .add_declared_method(name, body="return 1;")
        )
        assert registry.virtual_properties == {}
        assert registry.virtual_methods == {}
        assert registry.declared_properties == {}
        assert registry.declared_methods == {}

    @pytest.mark.parametrize("name", ["_id", "firstName", "name2", "größe"])
    def test_valid_names_accepted(self, name):
        registry = EntryRegistry().add_virtual_property(name).add_virtual_method(f"get{name}")
        assert name in registry.virtual_properties
        assert f"get{name}" in registry.virtual_methods

"""Tests for record field metadata."""

from dataclasses import dataclass, field, make_dataclass
from typing import NamedTuple, Optional

from valuefmt import Field, Ref, TagResolver, record_items, tag
from valuefmt.meta import _lookup


@dataclass
class User:
    name: str = field(metadata=tag(json="username", yaml="Username"))
    mail: str = field(metadata=tag(json="email,omitempty"))
    password: str = field(default="", metadata=tag(json="-"))
    _secret: str = ""


@dataclass
class Base:
    id: int = field(metadata=tag(json="id"))
    kind: str = "base"


@dataclass
class Item:
    _base: Optional[Base] = field(metadata=tag(embedded=True))
    name: str = ""
    kind: str = "item"


@dataclass
class NamedItem:
    _base: Base = field(metadata=tag(json="base", embedded=True))
    name: str = ""


@dataclass
class Hidden:
    _a: int = 0
    _b: int = 0


@dataclass
class Options:
    count: int = field(default=0, metadata=tag(json=",omitempty"))


class Point(NamedTuple):
    x: int
    y: int


class TestTagResolver:
    """Test resolving display names from tags."""

    def test_json_names(self):
        resolve = TagResolver("json")
        assert resolve(User) == [Field("name", "username"), Field("mail", "email")]

    def test_other_tag(self):
        resolve = TagResolver("yaml")
        assert resolve(User) == [
            Field("name", "Username"),
            Field("mail", "mail"),
            Field("password", "password"),
        ]

    def test_instances_and_references(self):
        resolve = TagResolver("json")
        user = User("Jane", "jane@local")
        assert resolve(user) == resolve(User)
        assert resolve(Ref(user)) == resolve(User)

    def test_idempotent(self):
        resolve = TagResolver("json")
        assert resolve(User) == resolve(User)
        assert resolve(User) is not resolve(User)

    def test_not_a_record(self):
        resolve = TagResolver()
        assert resolve(dict) == []
        assert resolve(42) == []
        assert resolve(None) == []

    def test_private_fields_hidden(self):
        assert TagResolver()(Hidden) == []

    def test_empty_name_uses_identifier(self):
        assert TagResolver()(Options) == [Field("count", "count")]

    def test_named_tuple(self):
        assert TagResolver()(Point) == [Field("x", "x"), Field("y", "y")]

    def test_embedded_record_promoted(self):
        assert TagResolver()(Item) == [
            Field("_base", ""),
            Field("name", "name"),
            Field("kind", "kind"),
        ]

    def test_embedded_record_with_name(self):
        assert TagResolver()(NamedItem) == [Field("_base", "base"), Field("name", "name")]

    def test_cache_is_bounded(self):
        resolve = TagResolver()
        for i in range(300):
            record_type = make_dataclass(f"Runtime{i}", [("value", int)])
            assert resolve(record_type) == [Field("value", "value")]
        assert _lookup.cache_info().currsize <= 256

    def test_options(self):
        resolve = TagResolver("json")
        assert resolve.options(User, "mail") == frozenset({"omitempty"})
        assert resolve.options(User, "name") == frozenset()
        assert resolve.options(Options, "count") == frozenset({"omitempty"})
        assert resolve.options(dict, "x") == frozenset()


class TestRecordItems:
    """Test flattening record instances."""

    def test_simple(self):
        items = record_items(User("Jane", "jane@local"))
        assert [(i.name, i.value) for i in items] == [
            ("username", "Jane"),
            ("email", "jane@local"),
        ]
        assert items[1].options == frozenset({"omitempty"})

    def test_promotion_and_shadowing(self):
        items = record_items(Item(Base(1)))
        assert [(i.name, i.value) for i in items] == [("id", 1), ("name", ""), ("kind", "item")]

    def test_empty_embedded(self):
        items = record_items(Item(None, "n"))
        assert [(i.name, i.value) for i in items] == [("name", "n"), ("kind", "item")]

    def test_named_embedded_not_promoted(self):
        base = Base(2)
        items = record_items(NamedItem(base, "n"))
        assert [(i.name, i.value) for i in items] == [("base", base), ("name", "n")]

    def test_reference(self):
        user = User("Jane", "jane@local")
        assert record_items(Ref(user)) == record_items(user)

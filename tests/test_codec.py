"""Tests for reducing values to plain data."""

import datetime
import enum
from dataclasses import dataclass, field

import pytest

from valuefmt import Ref, RenderDepthError, UnsupportedTypeError, tag, to_plain
from valuefmt.codec import is_empty
from valuefmt.meta import TagResolver


@dataclass
class User:
    name: str = field(metadata=tag(json="username", yaml="Username"))
    mail: str = field(metadata=tag(json="email,omitempty"))
    password: str = field(default="", metadata=tag(json="-"))


@dataclass
class Team:
    name: str
    members: list = field(default_factory=list)
    lead: object = None


class Level(enum.Enum):
    LOW = 1


class TestToPlain:
    """Test normalization into JSON-compatible data."""

    def test_containers(self):
        assert to_plain({"a": (1, 2.5), 3: None}) == {"a": [1, 2.5], "3": None}

    def test_records(self):
        assert to_plain(User("Jane", "jane@local")) == {"username": "Jane", "email": "jane@local"}

    def test_omitempty(self):
        assert to_plain(User("Jane", "")) == {"username": "Jane"}

    def test_resolver(self):
        plain = to_plain(User("Jane", "jane@local", "pw"), TagResolver("yaml"))
        assert plain == {"Username": "Jane", "mail": "jane@local", "password": "pw"}

    def test_nested_records_and_references(self):
        team = Team("core", [Ref(User("Jane", "j@l"))], lead=Ref())
        assert to_plain(team) == {
            "name": "core",
            "members": [{"username": "Jane", "email": "j@l"}],
            "lead": None,
        }

    def test_scalar_like_objects(self):
        assert to_plain(b"hi") == "aGk="
        assert to_plain(datetime.date(2024, 1, 2)) == "2024-01-02"
        assert to_plain(Level.LOW) == 1
        assert to_plain(True) is True

    def test_unsupported_values(self):
        with pytest.raises(UnsupportedTypeError):
            to_plain([1 + 2j])
        with pytest.raises(UnsupportedTypeError):
            to_plain({"f": len})
        with pytest.raises(UnsupportedTypeError):
            to_plain(iter([1]))

    def test_strict_keys(self):
        with pytest.raises(UnsupportedTypeError):
            to_plain({(1, 2): 1})
        with pytest.raises(UnsupportedTypeError):
            to_plain({1.5: 1})

    def test_loose_keys(self):
        assert to_plain({1: "a", (1, 2): "b"}, strict_keys=False) == {1: "a", "1 2": "b"}

    def test_depth_limit(self):
        value = []
        for _ in range(10):
            value = [value]
        with pytest.raises(RenderDepthError):
            to_plain(value, max_depth=5)
        assert to_plain(value, max_depth=20) == value

    def test_does_not_modify_input(self):
        data = {"a": [1, 2]}
        to_plain(data)
        assert data == {"a": [1, 2]}


class TestIsEmpty:
    """Test the omitempty predicate."""

    def test_empty(self):
        for value in (None, Ref(), 0, 0.0, False, "", [], {}, ()):
            assert is_empty(value), value

    def test_not_empty(self):
        for value in (1, "x", [0], {"a": None}, User("", "")):
            assert not is_empty(value), value

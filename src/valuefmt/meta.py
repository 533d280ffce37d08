"""Record field metadata: display names derived from field tags.

A record is a dataclass or a NamedTuple. Display names are declared with
dataclass field metadata keyed by a tag name, using the familiar
``name,option,...`` syntax::

    @dataclass
    class User:
        name: str = field(metadata=tag(json="username", yaml="Username"))
        mail: str = field(metadata=tag(json="email,omitempty"))
        password: str = field(default="", metadata=tag(json="-"))

A tag of ``"-"`` hides the field. An empty name keeps the field identifier.
Fields whose identifier starts with an underscore are private and hidden,
unless they embed another record (``tag(embedded=True)``), in which case the
embedded record's fields are promoted into the outer record.
"""

from __future__ import annotations

import dataclasses
import functools
import types
import typing
from typing import Any, NamedTuple

from valuefmt.core import deref, is_record, is_record_type

# Metadata key marking a field as an embedded (anonymous) record
EMBEDDED = "embedded"

# Tag value that omits a field
OMIT = "-"

# Number of (record type, tag) pairs whose resolved fields are cached
_CACHE_SIZE = 256


class Field(NamedTuple):
    """A record field and the name it is displayed under.

    An empty ``name`` marks an embedded record whose fields are promoted.
    """

    field: str
    name: str


class RecordItem(NamedTuple):
    """A displayed record entry: name, field value and tag options."""

    name: str
    value: Any
    options: frozenset[str]


class _FieldSpec(NamedTuple):
    name: str
    tag: str
    embedded: bool
    record: bool


def tag(*, embedded: bool = False, **names: str) -> dict[str, Any]:
    """Build dataclass field metadata carrying display names per tag.

    Examples:
        >>> tag(json="username", yaml="Username")
        {'json': 'username', 'yaml': 'Username'}
        >>> tag(json="Type", embedded=True)
        {'json': 'Type', 'embedded': True}
    """
    metadata: dict[str, Any] = dict(names)
    if embedded:
        metadata[EMBEDDED] = True
    return metadata


class TagResolver:
    """Resolve record fields using the tag with the given name.

    Results are cached per (tag name, record type).

    Examples:
        >>> resolve = TagResolver("json")
        >>> resolve(User)  # doctest: +SKIP
        [Field(field='name', name='username'), Field(field='mail', name='email')]
    """

    def __init__(self, tag_name: str = "json"):
        self.tag_name = tag_name

    def __call__(self, record_type: Any) -> list[Field]:
        return self.lookup(record_type)

    def __repr__(self) -> str:
        return f"TagResolver({self.tag_name!r})"

    def lookup(self, record_type: Any) -> list[Field]:
        """Return the displayed fields of a record type in declaration order.

        ``record_type`` may also be a record instance or a reference to one.
        Anything that is not a record yields no fields.
        """
        cls = _record_class(record_type)
        if cls is None:
            return []
        return list(_lookup(cls, self.tag_name))

    def options(self, record_type: Any, field_name: str) -> frozenset[str]:
        """Return the tag options (e.g. ``omitempty``) of a single field."""
        cls = _record_class(record_type)
        if cls is None:
            return frozenset()
        return _options(cls, self.tag_name).get(field_name, frozenset())


def _record_class(record_type: Any) -> type | None:
    if not isinstance(record_type, type):
        record_type = type(deref(record_type))
    return record_type if is_record_type(record_type) else None


@functools.lru_cache(maxsize=_CACHE_SIZE)
def _lookup(cls: type, tag_name: str) -> tuple[Field, ...]:
    fields = []
    for spec in _field_specs(cls, tag_name):
        name = _field_name(spec)
        if name is not None:
            fields.append(Field(spec.name, name))
    return tuple(fields)


@functools.lru_cache(maxsize=_CACHE_SIZE)
def _options(cls: type, tag_name: str) -> dict[str, frozenset[str]]:
    return {
        spec.name: frozenset(opt for opt in spec.tag.split(",")[1:] if opt)
        for spec in _field_specs(cls, tag_name)
    }


def _field_specs(cls: type, tag_name: str) -> list[_FieldSpec]:
    if not dataclasses.is_dataclass(cls):
        return [_FieldSpec(name, "", False, False) for name in cls._fields]

    try:
        hints = typing.get_type_hints(cls)
    except (NameError, TypeError):
        hints = {}

    specs = []
    for f in dataclasses.fields(cls):
        embedded = bool(f.metadata.get(EMBEDDED, False))
        record = _is_record_annotation(hints.get(f.name, f.type))
        specs.append(
            _FieldSpec(
                name=f.name,
                tag=str(f.metadata.get(tag_name, "")),
                embedded=embedded,
                # an unresolvable annotation on an embedded field is trusted
                record=embedded and (record is None or record),
            )
        )
    return specs


def _is_record_annotation(hint: Any) -> bool | None:
    if isinstance(hint, str):
        return None
    origin = typing.get_origin(hint)
    if origin is typing.Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        return len(args) == 1 and is_record_type(args[0])
    return is_record_type(hint)


def _field_name(spec: _FieldSpec) -> str | None:
    """Return the display name, ``""`` to promote, or None to hide the field."""
    promotable = spec.embedded and spec.record
    if spec.name.startswith("_") and not promotable:
        return None
    if spec.tag == OMIT:
        return None
    name = spec.tag.split(",", 1)[0]
    if not name and not promotable:
        name = spec.name
    return name


default_resolver = TagResolver("json")


def record_items(value: Any, resolver: TagResolver | None = None) -> list[RecordItem]:
    """Flatten a record instance into its displayed entries.

    Fields of embedded records without a display name are promoted into the
    outer record; an outer field shadows a promoted field of the same name.
    An empty embedded reference contributes nothing.
    """
    resolver = resolver or default_resolver
    value = deref(value)
    fields = resolver(type(value))
    direct = {f.name for f in fields if f.name}
    options = getattr(resolver, "options", None)

    items = []
    for f in fields:
        field_value = getattr(value, f.field)
        if f.name:
            opts = options(type(value), f.field) if options else frozenset()
            items.append(RecordItem(f.name, field_value, opts))
            continue
        inner = deref(field_value)
        if is_record(inner):
            items.extend(item for item in record_items(inner, resolver) if item.name not in direct)
        elif inner is not None:
            items.append(RecordItem(f.field, field_value, frozenset()))
    return items

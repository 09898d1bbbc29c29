"""
Schema declaration for the mapping layer.

A schema maps an application field name to a `Field`, which carries one
coercion for each direction:

- `entity`: storage value -> application value (used by `to_application`)
- `db`:     application value -> storage value (used by `to_storage`)

Coercions form a closed set of kinds; the engine in `core.coercion` matches
on them. Modules normally use the ready-made forms at the bottom:

    TASK_SCHEMA = {
        "taskId": fields.number,
        "status": fields.enum(TASK_STATUSES),
        "createdAt": fields.date,
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping

Record = dict[str, Any]
ComputeFn = Callable[[Record, "Record | None"], Any]


class Coercion:
    """Base of all coercion kinds."""


@dataclass(frozen=True)
class Number(Coercion):
    pass


@dataclass(frozen=True)
class String(Coercion):
    pass


@dataclass(frozen=True)
class Boolean(Coercion):
    pass


@dataclass(frozen=True)
class Date(Coercion):
    pass


@dataclass(frozen=True)
class Json(Coercion):
    pass


@dataclass(frozen=True)
class ArrayOfString(Coercion):
    pass


@dataclass(frozen=True)
class Enum(Coercion):
    # application value -> storage value
    mapping: Mapping[str, str]
    # extra storage values recognised on read, storage value -> application value
    aliases: Mapping[str, str] = field(default_factory=dict)

    def to_storage(self, value: Any) -> Any:
        if isinstance(value, str) and value in self.mapping:
            return self.mapping[value]
        return value

    def to_application(self, value: Any) -> Any:
        for app_value, stored in self.mapping.items():
            if stored == value:
                return app_value
        if isinstance(value, (str, int)) and str(value) in self.aliases:
            return self.aliases[str(value)]
        return value


@dataclass(frozen=True)
class NestedEntity(Coercion):
    schema: Mapping[str, "Field"]


@dataclass(frozen=True)
class Computed(Coercion):
    fn: ComputeFn


@dataclass(frozen=True)
class Transient(Coercion):
    pass


@dataclass(frozen=True)
class Literal(Coercion):
    text: str


@dataclass(frozen=True)
class Field:
    entity: Coercion | None = None
    db: Coercion | None = None


Schema = Mapping[str, Field]


number = Field(Number(), Number())
string = Field(String(), String())
boolean = Field(Boolean(), Boolean())
date = Field(Date(), Date())
json = Field(Json(), Json())
array_of_string = Field(ArrayOfString(), String())
transient = Field(Transient(), Transient())


def enum(values: Iterable[str], aliases: Mapping[str, str] | None = None) -> Field:
    """
    Enum over a set of allowed values, stored verbatim.

    `aliases` lists legacy storage values that should still read back as one
    of the allowed values (e.g. {"0": "Admin"}).
    """
    kind = Enum(mapping={v: v for v in values}, aliases=dict(aliases or {}))
    return Field(kind, kind)


def entity(schema: Schema) -> Field:
    kind = NestedEntity(schema)
    return Field(kind, kind)


def computed(fn: ComputeFn, db: Coercion | None = None) -> Field:
    """
    Application value always derived from the record (and the parent record
    for nested entities). Without a `db` coercion the field is never stored.
    """
    return Field(Computed(fn), db)


def literal(text: str) -> Field:
    kind = Literal(text)
    return Field(kind, kind)

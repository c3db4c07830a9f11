from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final


# region Descriptors
@dataclass(frozen=True)
class Type:
    name: str
    jvm_name: str


@dataclass(frozen=True)
class Variable:
    name: str
    jvm_name: str
    type: Type


@dataclass(frozen=True)
class Function:
    name: str
    jvm_name: str
    return_type: Type
    parameter_types: tuple[Type, ...] = field(default_factory=tuple)


# endregion


# region Builtin types
ANY: Final = Type("Any", "Object")
NIL: Final = Type("Nil", "Void")
COMPARABLE: Final = Type("Comparable", "Comparable")
BOOLEAN: Final = Type("Boolean", "boolean")
INTEGER: Final = Type("Integer", "int")
DECIMAL: Final = Type("Decimal", "double")
CHARACTER: Final = Type("Character", "char")
STRING: Final = Type("String", "String")
INTEGER_ITERABLE: Final = Type("IntegerIterable", "Iterable<Integer>")

BUILTIN_TYPES: Final[dict[str, Type]] = {
    t.name: t
    for t in (
        ANY,
        NIL,
        COMPARABLE,
        BOOLEAN,
        INTEGER,
        DECIMAL,
        CHARACTER,
        STRING,
        INTEGER_ITERABLE,
    )
}


def lookup_type(name: str) -> Type:
    try:
        return BUILTIN_TYPES[name]

    except KeyError:
        raise KeyError(f"Unknown type: {name}") from None


# endregion

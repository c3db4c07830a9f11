from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import IntEnum, auto
from typing import Iterator, TypeAlias

from .environment import Function, Variable


# region Base
@dataclass(frozen=True)
class Node:
    def walk(self) -> Iterator[Node]:
        raise NotImplementedError()


# endregion


# region Expressions
class LiteralKind(IntEnum):
    STRING = auto()
    CHARACTER = auto()
    INTEGER = auto()
    DECIMAL = auto()
    BOOLEAN = auto()
    NIL = auto()


def infer_literal_kind(value: object) -> LiteralKind:
    """Pick the literal kind for a plain Python value.

    ``bool`` is checked before ``int`` since it is a subclass of it.
    Characters cannot be inferred and must be tagged explicitly.
    """
    if value is None:
        return LiteralKind.NIL

    if isinstance(value, bool):
        return LiteralKind.BOOLEAN

    if isinstance(value, int):
        return LiteralKind.INTEGER

    if isinstance(value, (Decimal, float)):
        return LiteralKind.DECIMAL

    if isinstance(value, str):
        return LiteralKind.STRING

    raise TypeError(f"Unsupported literal value: {value!r}")


@dataclass(frozen=True)
class Literal(Node):
    value: object
    kind: LiteralKind | None = None

    def __post_init__(self) -> None:
        if self.kind is None:
            object.__setattr__(self, "kind", infer_literal_kind(self.value))

    def walk(self):
        yield self


@dataclass(frozen=True)
class Group(Node):
    expression: Expr

    def walk(self):
        yield self
        yield from self.expression.walk()


@dataclass(frozen=True)
class Binary(Node):
    operator: str
    left: Expr
    right: Expr

    def walk(self):
        yield self
        yield from self.left.walk()
        yield from self.right.walk()


@dataclass(frozen=True)
class Access(Node):
    variable: Variable
    receiver: Expr | None = None

    def walk(self):
        yield self
        if self.receiver is not None:
            yield from self.receiver.walk()


@dataclass(frozen=True)
class Call(Node):
    function: Function
    arguments: tuple[Expr, ...] = field(default_factory=tuple)
    receiver: Expr | None = None

    def walk(self):
        yield self
        if self.receiver is not None:
            yield from self.receiver.walk()

        for arg in self.arguments:
            yield from arg.walk()


Expr: TypeAlias = "Literal | Group | Binary | Access | Call"

# endregion


# region Statements
@dataclass(frozen=True)
class ExpressionStmt(Node):
    expression: Expr

    def walk(self):
        yield self
        yield from self.expression.walk()


@dataclass(frozen=True)
class Declaration(Node):
    variable: Variable
    value: Expr | None = None

    def walk(self):
        yield self
        if self.value is not None:
            yield from self.value.walk()


@dataclass(frozen=True)
class Assignment(Node):
    receiver: Expr
    value: Expr

    def walk(self):
        yield self
        yield from self.receiver.walk()
        yield from self.value.walk()


@dataclass(frozen=True)
class If(Node):
    condition: Expr
    then_statements: tuple[Stmt, ...] = field(default_factory=tuple)
    else_statements: tuple[Stmt, ...] = field(default_factory=tuple)

    def walk(self):
        yield self
        yield from self.condition.walk()
        for stmt in self.then_statements:
            yield from stmt.walk()

        for stmt in self.else_statements:
            yield from stmt.walk()


@dataclass(frozen=True)
class For(Node):
    name: str
    value: Expr
    statements: tuple[Stmt, ...] = field(default_factory=tuple)

    def walk(self):
        yield self
        yield from self.value.walk()
        for stmt in self.statements:
            yield from stmt.walk()


@dataclass(frozen=True)
class While(Node):
    condition: Expr
    statements: tuple[Stmt, ...] = field(default_factory=tuple)

    def walk(self):
        yield self
        yield from self.condition.walk()
        for stmt in self.statements:
            yield from stmt.walk()


@dataclass(frozen=True)
class Return(Node):
    value: Expr

    def walk(self):
        yield self
        yield from self.value.walk()


Stmt: TypeAlias = (
    "ExpressionStmt | Declaration | Assignment | If | For | While | Return"
)

# endregion


# region Declarations
@dataclass(frozen=True)
class Field(Node):
    variable: Variable
    value: Expr | None = None

    def walk(self):
        yield self
        if self.value is not None:
            yield from self.value.walk()


@dataclass(frozen=True)
class Method(Node):
    function: Function
    parameters: tuple[str, ...] = field(default_factory=tuple)
    statements: tuple[Stmt, ...] = field(default_factory=tuple)

    def walk(self):
        yield self
        for stmt in self.statements:
            yield from stmt.walk()


@dataclass(frozen=True)
class Source(Node):
    fields: tuple[Field, ...] = field(default_factory=tuple)
    methods: tuple[Method, ...] = field(default_factory=tuple)

    def walk(self):
        yield self
        for f in self.fields:
            yield from f.walk()

        for m in self.methods:
            yield from m.walk()


# endregion

"""Reads analyzed trees from their JSON interchange form.

Every node is an object tagged with ``"_type"``::

    {"_type": "Source", "fields": [...], "methods": [...]}

Variable and function descriptors are untagged objects. Types are either a
builtin type name (``"Integer"``) or ``{"name": ..., "jvm_name": ...}``.
"""

from __future__ import annotations

import json
import re
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Callable, Final

from ..exceptions import AstLoadError
from .ast import (
    Access,
    Assignment,
    Binary,
    Call,
    Declaration,
    ExpressionStmt,
    Field,
    For,
    Group,
    If,
    Literal,
    LiteralKind,
    Method,
    Node,
    Return,
    Source,
    While,
)
from .environment import Function, Type, Variable, lookup_type

_INTEGER_RE: Final = re.compile(r"[+-]?[0-9]+")


# region Helpers
def _expect_object(obj: Any, path: str) -> dict:
    if not isinstance(obj, dict):
        raise AstLoadError(f"Expected an object, got {type(obj).__name__}", path)

    return obj


def _expect_list(obj: Any, path: str) -> list:
    if not isinstance(obj, list):
        raise AstLoadError(f"Expected a list, got {type(obj).__name__}", path)

    return obj


def _get(obj: dict, key: str, path: str) -> Any:
    if key not in obj:
        raise AstLoadError(f"Missing key {key!r}", path)

    return obj[key]


def _get_str(obj: dict, key: str, path: str) -> str:
    value = _get(obj, key, path)
    if not isinstance(value, str):
        raise AstLoadError(f"Expected a string for {key!r}", f"{path}.{key}")

    return value


def _jvm_name(obj: dict, path: str) -> str:
    name = _get_str(obj, "name", path)
    jvm_name = obj.get("jvm_name", name)
    if not isinstance(jvm_name, str):
        raise AstLoadError("Expected a string for 'jvm_name'", f"{path}.jvm_name")

    return jvm_name


# endregion


# region Descriptors
def load_type(obj: Any, path: str) -> Type:
    if isinstance(obj, str):
        try:
            return lookup_type(obj)

        except KeyError:
            raise AstLoadError(f"Unknown builtin type {obj!r}", path) from None

    obj = _expect_object(obj, path)
    return Type(_get_str(obj, "name", path), _jvm_name(obj, path))


def load_variable(obj: Any, path: str) -> Variable:
    obj = _expect_object(obj, path)
    return Variable(
        name=_get_str(obj, "name", path),
        jvm_name=_jvm_name(obj, path),
        type=load_type(_get(obj, "type", path), f"{path}.type"),
    )


def load_function(obj: Any, path: str) -> Function:
    obj = _expect_object(obj, path)
    params_path = f"{path}.parameter_types"
    params = _expect_list(obj.get("parameter_types", []), params_path)
    return Function(
        name=_get_str(obj, "name", path),
        jvm_name=_jvm_name(obj, path),
        return_type=load_type(_get(obj, "return_type", path), f"{path}.return_type"),
        parameter_types=tuple(
            load_type(p, f"{params_path}[{i}]") for i, p in enumerate(params)
        ),
    )


# endregion


# region Nodes
def _node(obj: dict, key: str, path: str) -> Node:
    return load_node(_get(obj, key, path), f"{path}.{key}")


def _optional_node(obj: dict, key: str, path: str) -> Node | None:
    value = obj.get(key)
    if value is None:
        return None

    return load_node(value, f"{path}.{key}")


def _nodes(obj: dict, key: str, path: str) -> tuple:
    items = _expect_list(obj.get(key, []), f"{path}.{key}")
    return tuple(load_node(item, f"{path}.{key}[{i}]") for i, item in enumerate(items))


def _param_names(obj: dict, path: str) -> tuple[str, ...]:
    names = _expect_list(obj.get("parameters", []), f"{path}.parameters")
    for i, name in enumerate(names):
        if not isinstance(name, str):
            raise AstLoadError("Expected a parameter name", f"{path}.parameters[{i}]")

    return tuple(names)


def _literal_value(kind: LiteralKind, value: Any, path: str) -> object:
    match kind:
        case LiteralKind.NIL:
            return None

        case LiteralKind.BOOLEAN:
            if not isinstance(value, bool):
                raise AstLoadError("Expected a boolean literal", path)

            return value

        case LiteralKind.INTEGER:
            if isinstance(value, int) and not isinstance(value, bool):
                return value

            if isinstance(value, str):
                if not _INTEGER_RE.fullmatch(value):
                    raise AstLoadError(f"Invalid integer literal {value!r}", path)

                value = Decimal(value)

            if not isinstance(value, Decimal) or value.as_tuple().exponent != 0:
                raise AstLoadError("Expected an integer literal", path)

            return int(value)

        case LiteralKind.DECIMAL:
            if isinstance(value, str):
                try:
                    value = Decimal(value)

                except InvalidOperation:
                    raise AstLoadError(f"Invalid decimal literal {value!r}", path) from None

            elif isinstance(value, float):
                value = Decimal(repr(value))

            elif isinstance(value, int) and not isinstance(value, bool):
                value = Decimal(value)

            if not isinstance(value, Decimal):
                raise AstLoadError("Expected a decimal literal", path)

            if not value.is_finite():
                raise AstLoadError(f"Decimal literal must be finite, got {value}", path)

            return value

        case LiteralKind.CHARACTER:
            if not isinstance(value, str) or len(value) != 1:
                raise AstLoadError("Expected a single character", path)

            return value

        case _:
            if not isinstance(value, str):
                raise AstLoadError("Expected a string literal", path)

            return value


def _load_literal(obj: dict, path: str) -> Literal:
    kind_name = _get_str(obj, "kind", path)
    try:
        kind = LiteralKind[kind_name]

    except KeyError:
        raise AstLoadError(f"Unknown literal kind {kind_name!r}", f"{path}.kind") from None

    value = _literal_value(kind, obj.get("value"), f"{path}.value")
    return Literal(value, kind)


_LOADERS: Final[dict[str, Callable[[dict, str], Node]]] = {
    "Source": lambda o, p: Source(
        fields=_nodes(o, "fields", p),
        methods=_nodes(o, "methods", p),
    ),
    "Field": lambda o, p: Field(
        variable=load_variable(_get(o, "variable", p), f"{p}.variable"),
        value=_optional_node(o, "value", p),
    ),
    "Method": lambda o, p: Method(
        function=load_function(_get(o, "function", p), f"{p}.function"),
        parameters=_param_names(o, p),
        statements=_nodes(o, "statements", p),
    ),
    "ExpressionStmt": lambda o, p: ExpressionStmt(_node(o, "expression", p)),
    "Declaration": lambda o, p: Declaration(
        variable=load_variable(_get(o, "variable", p), f"{p}.variable"),
        value=_optional_node(o, "value", p),
    ),
    "Assignment": lambda o, p: Assignment(
        receiver=_node(o, "receiver", p),
        value=_node(o, "value", p),
    ),
    "If": lambda o, p: If(
        condition=_node(o, "condition", p),
        then_statements=_nodes(o, "then_statements", p),
        else_statements=_nodes(o, "else_statements", p),
    ),
    "For": lambda o, p: For(
        name=_get_str(o, "name", p),
        value=_node(o, "value", p),
        statements=_nodes(o, "statements", p),
    ),
    "While": lambda o, p: While(
        condition=_node(o, "condition", p),
        statements=_nodes(o, "statements", p),
    ),
    "Return": lambda o, p: Return(_node(o, "value", p)),
    "Literal": _load_literal,
    "Group": lambda o, p: Group(_node(o, "expression", p)),
    "Binary": lambda o, p: Binary(
        operator=_get_str(o, "operator", p),
        left=_node(o, "left", p),
        right=_node(o, "right", p),
    ),
    "Access": lambda o, p: Access(
        variable=load_variable(_get(o, "variable", p), f"{p}.variable"),
        receiver=_optional_node(o, "receiver", p),
    ),
    "Call": lambda o, p: Call(
        function=load_function(_get(o, "function", p), f"{p}.function"),
        arguments=_nodes(o, "arguments", p),
        receiver=_optional_node(o, "receiver", p),
    ),
}


def load_node(obj: Any, path: str = "$") -> Node:
    obj = _expect_object(obj, path)
    tag = _get_str(obj, "_type", path)
    loader = _LOADERS.get(tag)
    if loader is None:
        raise AstLoadError(f"Unknown node type {tag!r}", f"{path}._type")

    return loader(obj, path)


# endregion


def load_source(text: str) -> Source:
    try:
        # Numbers stay Decimal so big integer literals skip the int digit limit.
        data = json.loads(text, parse_int=Decimal, parse_float=Decimal)

    except json.JSONDecodeError as err:
        raise AstLoadError(
            f"Invalid JSON: {err.msg} (line {err.lineno}, column {err.colno})"
        ) from err

    except (ValueError, RecursionError) as err:
        raise AstLoadError(f"Invalid JSON: {err}") from err

    node = load_node(data)
    if not isinstance(node, Source):
        raise AstLoadError(f"Expected a Source root, got {type(node).__name__}")

    return node


def load_source_file(path: Path) -> Source:
    try:
        text = path.read_text("utf-8-sig")

    except UnicodeDecodeError as err:
        raise AstLoadError(f"File is not valid UTF-8: {err.reason}") from err

    return load_source(text)

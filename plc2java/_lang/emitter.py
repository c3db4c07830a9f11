from __future__ import annotations

import io
import os
from contextlib import contextmanager
from decimal import Decimal
from typing import Final, Iterator, Protocol, Sequence

from .._cli.logging_setup import logger
from ..exceptions import MalformedTreeError
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
    Stmt,
    While,
)
from .environment import Variable


class TextSink(Protocol):
    def write(self, s: str, /) -> object: ...


# region Operators
BINARY_OPERATORS: Final[dict[str, str]] = {
    "AND": "&&",
    "OR": "||",
    "<": "<",
    ">": ">",
    "<=": "<=",
    ">=": ">=",
    "==": "==",
    "!=": "!=",
    "ADD": "+",
    "+": "+",
    "SUBTRACT": "-",
    "-": "-",
    "MULTIPLY": "*",
    "*": "*",
    "DIVIDE": "/",
    "/": "/",
    "EXPONENT": "^",
}


def operator_spelling(tag: str) -> str:
    spelling = BINARY_OPERATORS.get(tag)
    if spelling is None:
        logger.debug(f"Operator {tag!r} has no mapping, emitting as is")
        return tag

    return spelling


# endregion


# region Literals
_CONTROL_ESCAPES: Final[dict[str, str]] = {
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}
_STRING_TABLE: Final = str.maketrans({**_CONTROL_ESCAPES, '"': '\\"'})
_CHAR_TABLE: Final = str.maketrans({**_CONTROL_ESCAPES, "'": "\\'"})


def escape_string(text: str) -> str:
    return text.translate(_STRING_TABLE)


def escape_char(text: str) -> str:
    return text.translate(_CHAR_TABLE)


def _invalid_value(node: Literal) -> MalformedTreeError:
    return MalformedTreeError(node, "value", f"is not a valid {node.kind.name} value")


def render_literal(node: Literal) -> str:
    value = node.value
    match node.kind:
        case LiteralKind.STRING:
            if not isinstance(value, str):
                raise _invalid_value(node)

            return f'"{escape_string(value)}"'

        case LiteralKind.CHARACTER:
            if not isinstance(value, str) or len(value) != 1:
                raise _invalid_value(node)

            return f"'{escape_char(value)}'"

        case LiteralKind.INTEGER:
            if isinstance(value, bool) or not isinstance(value, int):
                raise _invalid_value(node)

            # Through Decimal, so ints past the int->str digit limit still render.
            return format(Decimal(value), "f")

        case LiteralKind.DECIMAL:
            if isinstance(value, float):
                value = Decimal(repr(value))

            if not isinstance(value, Decimal) or not value.is_finite():
                raise _invalid_value(node)

            return str(value)

        case LiteralKind.BOOLEAN:
            if not isinstance(value, bool):
                raise _invalid_value(node)

            return "true" if value else "false"

        case LiteralKind.NIL:
            return "null"

        case _:
            raise MalformedTreeError(node, "kind")


# endregion


class JavaEmitter:
    """Writes a resolved ``Source`` tree to a text sink as one Java class.

    The emitter owns only its sink handle and the indentation depth. Use one
    instance per tree; instances share nothing.
    """

    _INDENT: Final[str] = "    "
    _CLASS_NAME: Final[str] = "Main"

    def __init__(self, sink: TextSink, newline: str = os.linesep) -> None:
        self._sink = sink
        self._newline = newline
        self._level = 0

    @property
    def level(self) -> int:
        return self._level

    # region Low-level helpers
    def write(self, fragment: str) -> None:
        self._sink.write(fragment)

    def indent_line(self) -> None:
        if self._level:
            self._sink.write(self._INDENT * self._level)

    def newline(self) -> None:
        self._sink.write(self._newline)

    def enter_block(self) -> None:
        self._level += 1

    def exit_block(self) -> None:
        self._level -= 1

    @contextmanager
    def block(self) -> Iterator[None]:
        self.enter_block()
        try:
            yield

        finally:
            self.exit_block()

    @staticmethod
    def _require(node: object, attr: str):
        value = getattr(node, attr, None)
        if value is None:
            raise MalformedTreeError(node, attr)

        return value

    @staticmethod
    def _require_seq(node: object, attr: str) -> Sequence:
        value = getattr(node, attr, None)
        if value is None:
            raise MalformedTreeError(node, attr)

        if not isinstance(value, (tuple, list)):
            raise MalformedTreeError(node, attr, "is not a sequence")

        return value

    # endregion

    def emit(self, node: Node) -> None:
        self._level = 0
        self.visit(node)
        if isinstance(node, Source):
            logger.debug(
                f"Rendered class {self._CLASS_NAME}: "
                f"{len(node.fields)} field(s), {len(node.methods)} method(s)"
            )

    def visit(self, node: Node) -> None:
        match node:
            case Source():
                self._emit_source(node)

            case Field():
                self._emit_field(node)

            case Method():
                self._emit_method(node)

            case ExpressionStmt():
                text = self.expr(self._require(node, "expression"))
                self.indent_line()
                self.write(f"{text};")
                self.newline()

            case Declaration():
                text = self._variable_decl(self._require(node, "variable"), node.value)
                self.indent_line()
                self.write(text)

            case Assignment():
                receiver = self.expr(self._require(node, "receiver"))
                value = self.expr(self._require(node, "value"))
                self.indent_line()
                self.write(f"{receiver} = {value};")
                self.newline()

            case If():
                self._emit_if(node)

            case For():
                name = self._require(node, "name")
                value = self.expr(self._require(node, "value"))
                statements = self._require_seq(node, "statements")
                self.indent_line()
                self.write(f"for (var {name} : {value})")
                self._emit_body(statements)
                self.newline()

            case While():
                condition = self.expr(self._require(node, "condition"))
                statements = self._require_seq(node, "statements")
                self.indent_line()
                self.write(f"while ({condition})")
                self._emit_body(statements)
                self.newline()

            case Return():
                value = self.expr(self._require(node, "value"))
                self.indent_line()
                self.write(f"return {value};")
                self.newline()

            case Literal() | Group() | Binary() | Access() | Call():
                self.write(self.expr(node))

            case _:
                raise MalformedTreeError(node)

    # region Program
    def _emit_source(self, node: Source) -> None:
        fields = self._require_seq(node, "fields")
        methods = self._require_seq(node, "methods")
        self.write(f"public class {self._CLASS_NAME} {{")
        self.newline()

        with self.block():
            if fields:
                self.newline()
                for f in fields:
                    self._emit_field(f)

                self.newline()

            self._emit_entry_point()

            if methods:
                self.newline()
                for i, method in enumerate(methods):
                    if i > 0:
                        self.newline()

                    self._emit_method(method)

        self.indent_line()
        self.write("}")

    def _emit_entry_point(self) -> None:
        self.indent_line()
        self.write("public static void main(String[] args) {")
        self.newline()
        with self.block():
            self.indent_line()
            self.write(f"System.exit(new {self._CLASS_NAME}().main());")
            self.newline()

        self.indent_line()
        self.write("}")
        self.newline()

    def _emit_field(self, node: Field) -> None:
        text = self._variable_decl(self._require(node, "variable"), node.value)
        self.indent_line()
        self.write(text)
        self.newline()

    def _variable_decl(self, variable: Variable, value: Node | None) -> str:
        # Shared by fields and local declarations; the caller ends the line.
        var_type = self._require(variable, "type")
        text = f"{var_type.jvm_name} {variable.jvm_name}"
        if value is not None:
            text += f" = {self.expr(value)}"

        return f"{text};"

    def _emit_method(self, node: Method) -> None:
        function = self._require(node, "function")
        return_type = self._require(function, "return_type")
        parameter_types = self._require_seq(function, "parameter_types")
        parameters = self._require_seq(node, "parameters")
        statements = self._require_seq(node, "statements")
        if len(parameter_types) != len(parameters):
            raise MalformedTreeError(
                node, "parameters", "do not match the function parameter types"
            )

        params = ", ".join(
            f"{t.jvm_name} {name}" for t, name in zip(parameter_types, parameters)
        )

        self.indent_line()
        self.write(f"{return_type.jvm_name} {function.jvm_name}({params}) {{")
        self.newline()
        with self.block():
            self._emit_statements(statements)

        self.indent_line()
        self.write("}")
        self.newline()

    # endregion

    # region Statements
    def _emit_statements(self, statements: Sequence[Stmt]) -> None:
        for stmt in statements:
            self.visit(stmt)
            # Declarations and ifs leave their line open.
            if isinstance(stmt, (Declaration, If)):
                self.newline()

    def _emit_body(self, statements: Sequence[Stmt]) -> None:
        if not statements:
            self.write(" {}")
            return

        self.write(" {")
        self.newline()
        with self.block():
            self._emit_statements(statements)

        self.indent_line()
        self.write("}")

    def _emit_if(self, node: If) -> None:
        condition = self.expr(self._require(node, "condition"))
        then_statements = self._require_seq(node, "then_statements")
        else_statements = self._require_seq(node, "else_statements")
        self.indent_line()
        self.write(f"if ({condition})")
        self._emit_body(then_statements)
        if else_statements:
            self.write(" else")
            self._emit_body(else_statements)

    # endregion

    # region Expressions
    def expr(self, node: Node) -> str:
        match node:
            case Literal():
                return render_literal(node)

            case Group():
                return f"({self.expr(self._require(node, 'expression'))})"

            case Binary():
                op = operator_spelling(self._require(node, "operator"))
                left = self.expr(self._require(node, "left"))
                right = self.expr(self._require(node, "right"))
                return f"{left} {op} {right}"

            case Access():
                variable = self._require(node, "variable")
                return self._qualify(node.receiver, variable.jvm_name)

            case Call():
                function = self._require(node, "function")
                arguments = self._require_seq(node, "arguments")
                args = ", ".join(self.expr(a) for a in arguments)
                return self._qualify(node.receiver, f"{function.jvm_name}({args})")

            case _:
                raise MalformedTreeError(node)

    def _qualify(self, receiver: Node | None, text: str) -> str:
        if receiver is None:
            return text

        return f"{self.expr(receiver)}.{text}"

    # endregion


def generate(source: Source, newline: str = os.linesep) -> str:
    buf = io.StringIO()
    JavaEmitter(buf, newline=newline).emit(source)
    return buf.getvalue()

import json
from decimal import Decimal
from pathlib import Path

import pytest

from plc2java._lang.ast import Literal, LiteralKind, Source
from plc2java._lang.ast_loader import load_node, load_source, load_source_file
from plc2java._lang.emitter import generate
from plc2java.exceptions import AstLoadError

X_VAR = {"name": "x", "type": "Integer"}

PROGRAM = {
    "_type": "Source",
    "fields": [
        {
            "_type": "Field",
            "variable": X_VAR,
            "value": {"_type": "Literal", "kind": "INTEGER", "value": "5"},
        }
    ],
    "methods": [
        {
            "_type": "Method",
            "function": {"name": "f", "return_type": "Integer"},
            "parameters": [],
            "statements": [
                {
                    "_type": "Return",
                    "value": {"_type": "Access", "variable": X_VAR},
                }
            ],
        }
    ],
}


# region Happy path
def test_load_program_and_render():
    source = load_source(json.dumps(PROGRAM))
    assert isinstance(source, Source)

    expected = (
        "public class Main {\n"
        "\n"
        "    int x = 5;\n"
        "\n"
        "    public static void main(String[] args) {\n"
        "        System.exit(new Main().main());\n"
        "    }\n"
        "\n"
        "    int f() {\n"
        "        return x;\n"
        "    }\n"
        "}"
    )
    assert generate(source, newline="\n") == expected


def test_load_source_file(tmp_path: Path):
    src = tmp_path / "main.ast.json"
    src.write_text(json.dumps(PROGRAM), encoding="utf-8")
    source = load_source_file(src)
    assert len(source.fields) == 1
    assert source.methods[0].function.jvm_name == "f"


def test_custom_type_and_jvm_name():
    node = load_node(
        {
            "_type": "Access",
            "variable": {
                "name": "class",
                "jvm_name": "_class",
                "type": {"name": "Point", "jvm_name": "geo.Point"},
            },
        }
    )
    assert node.variable.jvm_name == "_class"
    assert node.variable.type.jvm_name == "geo.Point"


def test_big_integer_and_decimal_literals():
    big = load_node(
        {"_type": "Literal", "kind": "INTEGER", "value": "123456789012345678901234567890"}
    )
    dec = load_node({"_type": "Literal", "kind": "DECIMAL", "value": "0.10"})
    assert big == Literal(123456789012345678901234567890, LiteralKind.INTEGER)
    assert dec.value == Decimal("0.10")


def test_character_and_nil_literals():
    char = load_node({"_type": "Literal", "kind": "CHARACTER", "value": "'"})
    nil = load_node({"_type": "Literal", "kind": "NIL"})
    assert char.kind == LiteralKind.CHARACTER
    assert nil.value is None


def test_call_with_receiver():
    node = load_node(
        {
            "_type": "Call",
            "receiver": {"_type": "Access", "variable": X_VAR},
            "function": {
                "name": "add",
                "return_type": "Integer",
                "parameter_types": ["Integer"],
            },
            "arguments": [{"_type": "Literal", "kind": "INTEGER", "value": 1}],
        }
    )
    assert node.receiver.variable.name == "x"
    assert len(node.function.parameter_types) == 1
    assert node.arguments[0].value == 1



def test_integer_past_str_digit_limit():
    digits = "9" * 5000
    doc = {
        "_type": "Source",
        "fields": [
            {
                "_type": "Field",
                "variable": X_VAR,
                "value": {"_type": "Literal", "kind": "INTEGER", "value": "@"},
            }
        ],
    }
    # Raw JSON number, not a string.
    text = json.dumps(doc).replace('"@"', digits)
    source = load_source(text)
    assert source.fields[0].value.value == 10**5000 - 1
    assert f"int x = {digits};" in generate(source, newline="\n")


def test_decimal_keeps_json_precision():
    source = load_source(
        '{"_type": "Source", "fields": [{"_type": "Field", "variable": '
        '{"name": "d", "type": "Decimal"}, "value": {"_type": "Literal", '
        '"kind": "DECIMAL", "value": 0.1000000000000000000001}}]}'
    )
    assert source.fields[0].value.value == Decimal("0.1000000000000000000001")


# endregion


# region Errors
def test_invalid_json():
    with pytest.raises(AstLoadError, match="Invalid JSON"):
        load_source("{")


def test_unknown_node_type():
    with pytest.raises(AstLoadError, match="Unknown node type 'Lambda'") as err:
        load_node({"_type": "Lambda"})

    assert err.value.path == "$._type"


def test_missing_key_reports_path():
    doc = {"_type": "Source", "methods": [{"_type": "Method", "statements": []}]}
    with pytest.raises(AstLoadError, match="Missing key 'function'") as err:
        load_source(json.dumps(doc))

    assert err.value.path == "$.methods[0]"


def test_unknown_builtin_type():
    with pytest.raises(AstLoadError, match="Unknown builtin type 'Matrix'"):
        load_node({"_type": "Access", "variable": {"name": "m", "type": "Matrix"}})


def test_root_must_be_source():
    with pytest.raises(AstLoadError, match="Expected a Source root"):
        load_source(json.dumps({"_type": "Literal", "kind": "NIL"}))


def test_bad_literal_values():
    with pytest.raises(AstLoadError, match="Invalid integer literal"):
        load_node({"_type": "Literal", "kind": "INTEGER", "value": "1.5"})

    with pytest.raises(AstLoadError, match="Expected an integer literal"):
        load_node({"_type": "Literal", "kind": "INTEGER", "value": True})

    with pytest.raises(AstLoadError, match="Expected a single character"):
        load_node({"_type": "Literal", "kind": "CHARACTER", "value": "ab"})

    with pytest.raises(AstLoadError, match="Unknown literal kind"):
        load_node({"_type": "Literal", "kind": "FLOAT", "value": 1})


# endregion


# region Bad input
def test_invalid_utf8_file(tmp_path: Path):
    src = tmp_path / "main.ast.json"
    src.write_bytes(b'{"_type": "Source"\xff}')
    with pytest.raises(AstLoadError, match="not valid UTF-8"):
        load_source_file(src)


@pytest.mark.parametrize("value", ["NaN", "Infinity", "-Infinity", "sNaN"])
def test_non_finite_decimal_string(value):
    with pytest.raises(AstLoadError, match="must be finite"):
        load_node({"_type": "Literal", "kind": "DECIMAL", "value": value})


def test_non_finite_decimal_json_constant():
    text = (
        '{"_type": "Source", "fields": [{"_type": "Field", "variable": '
        '{"name": "d", "type": "Decimal"}, "value": {"_type": "Literal", '
        '"kind": "DECIMAL", "value": NaN}}]}'
    )
    with pytest.raises(AstLoadError, match="must be finite"):
        load_source(text)


def test_fractional_integer_literal():
    with pytest.raises(AstLoadError, match="Expected an integer literal"):
        load_source(
            '{"_type": "Source", "fields": [{"_type": "Field", "variable": '
            '{"name": "i", "type": "Integer"}, "value": {"_type": "Literal", '
            '"kind": "INTEGER", "value": 1.5}}]}'
        )


# endregion

"""Tests for the JSON description parser."""

from __future__ import annotations

import copy
import json

import pytest

from apikit.errors import MalformedTypeError, StructuralMismatchError
from apikit.ir import VOID, Array, Define, EnumVariant, Field, Name, Param, Pointer, Variadic
from apikit.backends.json import JsonParser, api_from_dict, parse_json

EMPTY = {"defines": [], "structs": [], "aliases": [], "enums": [], "callbacks": [], "functions": []}


def doc(**sections: list[dict]) -> dict:
    data = copy.deepcopy(EMPTY)
    data.update(sections)
    return data


class TestDocument:
    def test_empty(self) -> None:
        api = parse_json(json.dumps(EMPTY))
        assert all(count == 0 for count in api.counts().values())

    def test_key_order_irrelevant(self) -> None:
        data = doc(structs=[{"fields": [{"description": "", "name": "x", "type": "float"}], "name": "V"}])
        reordered = dict(reversed(list(data.items())))
        assert parse_json(json.dumps(data)) == parse_json(json.dumps(reordered, indent=4))

    def test_missing_section(self) -> None:
        data = doc()
        del data["aliases"]
        with pytest.raises(StructuralMismatchError, match="missing key 'aliases'"):
            api_from_dict(data)

    def test_section_not_a_list(self) -> None:
        with pytest.raises(StructuralMismatchError, match="must be an array"):
            api_from_dict(doc(enums={}))

    def test_root_not_an_object(self) -> None:
        with pytest.raises(StructuralMismatchError, match="expected an object"):
            parse_json("[]")

    def test_invalid_json(self) -> None:
        with pytest.raises(StructuralMismatchError, match="invalid JSON") as exc_info:
            parse_json('{\n  "defines": [,]\n}', "api.json")
        assert exc_info.value.line == 2
        assert str(exc_info.value).startswith("api.json:2:")

    def test_error_names_record_path(self) -> None:
        data = doc(structs=[{"name": "V", "fields": [{"name": "x"}]}])
        with pytest.raises(StructuralMismatchError, match=r"root\.structs\[0\]\.fields\[0\]: missing key 'type'"):
            api_from_dict(data, "api.json")


class TestDefines:
    def test_string_value(self) -> None:
        api = api_from_dict(doc(defines=[{"name": "V", "type": "STRING", "value": '"5.0"', "description": "Ver"}]))
        assert api.defines == [Define("V", "STRING", '"5.0"', "Ver")]

    def test_numeric_value_kept_as_text(self) -> None:
        api = api_from_dict(
            doc(
                defines=[
                    {"name": "MAJOR", "type": "INT", "value": 5, "description": ""},
                    {"name": "PI", "type": "FLOAT", "value": 3.5, "description": ""},
                ]
            )
        )
        assert [d.value for d in api.defines] == ["5", "3.5"]

    def test_float_literal_keeps_source_digits(self) -> None:
        text = json.dumps(doc()).replace(
            '"defines": []',
            '"defines": [{"name": "PI", "type": "FLOAT", "value": 3.14159265358979323846, "description": "Pi"}]',
        )
        assert parse_json(text).defines == [Define("PI", "FLOAT", "3.14159265358979323846", "Pi")]

    def test_exponent_literal_kept_as_written(self) -> None:
        text = json.dumps(doc()).replace('"defines": []', '"defines": [{"name": "E", "type": "FLOAT", "value": 1.0e-3}]')
        assert parse_json(text).defines[0].value == "1.0e-3"

    def test_bool_value_rejected(self) -> None:
        with pytest.raises(StructuralMismatchError, match="string or number"):
            api_from_dict(doc(defines=[{"name": "B", "type": "INT", "value": True}]))

    def test_missing_value(self) -> None:
        with pytest.raises(StructuralMismatchError, match="missing key 'value'"):
            api_from_dict(doc(defines=[{"name": "B", "type": "INT"}]))

    def test_missing_description_defaults_empty(self) -> None:
        api = api_from_dict(doc(defines=[{"name": "B", "type": "INT", "value": "1"}]))
        assert api.defines[0].description == ""


class TestStructs:
    def test_fields(self) -> None:
        api = api_from_dict(
            doc(
                structs=[
                    {
                        "name": "Image",
                        "description": "Image data",
                        "fields": [
                            {"type": "void *", "name": "data", "description": "Raw"},
                            {"type": "float[4]", "name": "tint", "description": "Tint"},
                        ],
                    }
                ]
            )
        )
        s = api.structs[0]
        assert s.description == "Image data"
        assert s.fields == [Field("data", Pointer(VOID), "Raw"), Field("tint", Array(Name("float"), 4), "Tint")]

    def test_desc_key_accepted(self) -> None:
        api = api_from_dict(doc(structs=[{"name": "S", "desc": "Short form", "fields": []}]))
        assert api.structs[0].description == "Short form"

    def test_malformed_field_type(self) -> None:
        data = doc(structs=[{"name": "S", "fields": [{"type": "long long", "name": "v"}]}])
        with pytest.raises(MalformedTypeError, match="Malformed type 'long long'") as exc_info:
            api_from_dict(data, "api.json")
        err = exc_info.value
        assert (err.source, err.record, err.line) == ("api.json", "root.structs[0].fields[0]", None)
        assert str(err).startswith("api.json: root.structs[0].fields[0]: Malformed type")

    def test_name_must_be_string(self) -> None:
        with pytest.raises(StructuralMismatchError, match="'name' must be a string"):
            api_from_dict(doc(structs=[{"name": 3, "fields": []}]))


class TestEnums:
    def test_values(self) -> None:
        data = doc(enums=[{"name": "E", "values": [{"name": "A", "value": 1, "description": "One"}]}])
        assert api_from_dict(data).enums[0].values == [EnumVariant("A", 1, "One")]

    @pytest.mark.parametrize("value", ["1", 1.5, True, None])
    def test_non_integer_value(self, value: object) -> None:
        data = doc(enums=[{"name": "E", "values": [{"name": "A", "value": value}]}])
        with pytest.raises(StructuralMismatchError, match="must be an integer"):
            api_from_dict(data)


class TestSignatures:
    def test_function(self) -> None:
        data = doc(
            functions=[
                {
                    "name": "TraceLog",
                    "description": "Log",
                    "returnType": "void",
                    "params": [{"type": "int", "name": "level"}, {"type": "...", "name": "args"}],
                }
            ]
        )
        f = api_from_dict(data).functions[0]
        assert f.return_type == VOID
        assert f.params == [Param("level", Name("int")), Param("args", Variadic())]
        assert f.description == "Log"

    def test_params_optional(self) -> None:
        data = doc(functions=[{"name": "CloseWindow", "returnType": "void"}])
        assert api_from_dict(data).functions[0].params == []

    def test_callback_return_type(self) -> None:
        data = doc(callbacks=[{"name": "Cb", "returnType": "unsigned char *", "params": []}])
        assert api_from_dict(data).callbacks[0].return_type == Pointer(Name("char", "unsigned"))

    def test_missing_return_type(self) -> None:
        with pytest.raises(StructuralMismatchError, match="missing key 'returnType'"):
            api_from_dict(doc(functions=[{"name": "F"}]))


class TestJsonParser:
    def test_name(self) -> None:
        assert JsonParser().name == "json"

    def test_parse_passes_filename(self) -> None:
        with pytest.raises(StructuralMismatchError, match="^api.json:"):
            JsonParser().parse("{", "api.json")

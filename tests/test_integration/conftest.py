"""Shared fixtures: one small API described in both encodings."""

from __future__ import annotations

import json

import pytest

from apikit.ir import (
    VOID,
    Alias,
    Api,
    Array,
    Callback,
    Define,
    Enum,
    EnumVariant,
    Field,
    Function,
    Name,
    Param,
    Pointer,
    Struct,
    Variadic,
)

SAMPLE_TEXT = """
Defines found: 3

Define 001: RAYLIB_H
  Name: RAYLIB_H
  Type: GUARD
  Value:
  Description:
Define 002: RAYLIB_VERSION_MAJOR
  Name: RAYLIB_VERSION_MAJOR
  Type: INT
  Value: 5
  Description:
Define 003: RAYLIB_VERSION
  Name: RAYLIB_VERSION
  Type: STRING
  Value: "5.0"
  Description: Library version

Structs found: 2

Struct 01: Vector2 (2 fields)
  Name: Vector2
  Description: Vector2, 2 components
  Field[1]: float x // Vector x component
  Field[2]: float y // Vector y component
Struct 02: Image (3 fields)
  Name: Image
  Description: Image, pixel data stored in CPU memory (RAM)
  Field[1]: void * data // Image raw data
  Field[2]: int width // Image base width
  Field[3]: float[4] tint // Tint <rgba> [0..1]

Aliases found: 1

Alias 001: Quaternion
  Type: Vector4
  Name: Quaternion
  Description: Quaternion, 4 components (Vector4 alias)

Enums found: 2

Enum 01: ConfigFlags (2 values)
  Name: ConfigFlags
  Description: System/Window config flags
  Value[FLAG_VSYNC_HINT]: 64
  Value[FLAG_FULLSCREEN_MODE]: 2
Enum 02: KeyboardKey (3 values)
  Name: KeyboardKey
  Description: Keyboard keys (US keyboard layout)
  Value[KEY_NULL]: 0
  Value[KEY_APOSTROPHE]: 39
  Value[KEY_COMMA]: 44

Callbacks found: 1

Callback 001: TraceLogCallback() (3 input parameters)
  Name: TraceLogCallback
  Return type: void
  Description: Logging: Redirect trace log messages
  Param[1]: logLevel (type: int)
  Param[2]: text (type: const char *)
  Param[3]: args (type: va_list)

Functions found: 3

Function 001: InitWindow() (3 input parameters)
  Name: InitWindow
  Return type: void
  Description: Initialize window and OpenGL context
  Param[1]: width (type: int)
  Param[2]: height (type: int)
  Param[3]: title (type: const char *)
Function 002: CloseWindow() (0 input parameters)
  Name: CloseWindow
  Return type: void
  Description: Close window and unload OpenGL context
  No input parameters
Function 003: TraceLog() (3 input parameters)
  Name: TraceLog
  Return type: void
  Description: Show trace log messages
  Param[1]: logLevel (type: int)
  Param[2]: text (type: const char *)
  Param[3]: args (type: ...)
"""

SAMPLE_DOCUMENT = {
    "defines": [
        {"name": "RAYLIB_H", "type": "GUARD", "value": "", "description": ""},
        {"name": "RAYLIB_VERSION_MAJOR", "type": "INT", "value": 5, "description": ""},
        {"name": "RAYLIB_VERSION", "type": "STRING", "value": '"5.0"', "description": "Library version"},
    ],
    "structs": [
        {
            "name": "Vector2",
            "description": "Vector2, 2 components",
            "fields": [
                {"type": "float", "name": "x", "description": "Vector x component"},
                {"type": "float", "name": "y", "description": "Vector y component"},
            ],
        },
        {
            "name": "Image",
            "description": "Image, pixel data stored in CPU memory (RAM)",
            "fields": [
                {"type": "void *", "name": "data", "description": "Image raw data"},
                {"type": "int", "name": "width", "description": "Image base width"},
                {"type": "float[4]", "name": "tint", "description": "Tint <rgba> [0..1]"},
            ],
        },
    ],
    "aliases": [
        {"type": "Vector4", "name": "Quaternion", "description": "Quaternion, 4 components (Vector4 alias)"},
    ],
    "enums": [
        {
            "name": "ConfigFlags",
            "description": "System/Window config flags",
            "values": [
                {"name": "FLAG_VSYNC_HINT", "value": 64, "description": ""},
                {"name": "FLAG_FULLSCREEN_MODE", "value": 2, "description": ""},
            ],
        },
        {
            "name": "KeyboardKey",
            "description": "Keyboard keys (US keyboard layout)",
            "values": [
                {"name": "KEY_NULL", "value": 0, "description": ""},
                {"name": "KEY_APOSTROPHE", "value": 39, "description": ""},
                {"name": "KEY_COMMA", "value": 44, "description": ""},
            ],
        },
    ],
    "callbacks": [
        {
            "name": "TraceLogCallback",
            "description": "Logging: Redirect trace log messages",
            "returnType": "void",
            "params": [
                {"type": "int", "name": "logLevel"},
                {"type": "const char *", "name": "text"},
                {"type": "va_list", "name": "args"},
            ],
        },
    ],
    "functions": [
        {
            "name": "InitWindow",
            "description": "Initialize window and OpenGL context",
            "returnType": "void",
            "params": [
                {"type": "int", "name": "width"},
                {"type": "int", "name": "height"},
                {"type": "const char *", "name": "title"},
            ],
        },
        {
            "name": "CloseWindow",
            "description": "Close window and unload OpenGL context",
            "returnType": "void",
        },
        {
            "name": "TraceLog",
            "description": "Show trace log messages",
            "returnType": "void",
            "params": [
                {"type": "int", "name": "logLevel"},
                {"type": "const char *", "name": "text"},
                {"type": "...", "name": "args"},
            ],
        },
    ],
}


def build_sample_api() -> Api:
    """The model both sample documents describe."""
    const_char_p = Pointer(Name("char"), constant=True)
    return Api(
        defines=[
            Define("RAYLIB_H", "GUARD", ""),
            Define("RAYLIB_VERSION_MAJOR", "INT", "5"),
            Define("RAYLIB_VERSION", "STRING", '"5.0"', "Library version"),
        ],
        structs=[
            Struct(
                "Vector2",
                [
                    Field("x", Name("float"), "Vector x component"),
                    Field("y", Name("float"), "Vector y component"),
                ],
                "Vector2, 2 components",
            ),
            Struct(
                "Image",
                [
                    Field("data", Pointer(VOID), "Image raw data"),
                    Field("width", Name("int"), "Image base width"),
                    Field("tint", Array(Name("float"), 4), "Tint <rgba> [0..1]"),
                ],
                "Image, pixel data stored in CPU memory (RAM)",
            ),
        ],
        aliases=[Alias("Quaternion", "Vector4", "Quaternion, 4 components (Vector4 alias)")],
        enums=[
            Enum(
                "ConfigFlags",
                [EnumVariant("FLAG_VSYNC_HINT", 64), EnumVariant("FLAG_FULLSCREEN_MODE", 2)],
                "System/Window config flags",
            ),
            Enum(
                "KeyboardKey",
                [EnumVariant("KEY_NULL", 0), EnumVariant("KEY_APOSTROPHE", 39), EnumVariant("KEY_COMMA", 44)],
                "Keyboard keys (US keyboard layout)",
            ),
        ],
        callbacks=[
            Callback(
                "TraceLogCallback",
                VOID,
                [Param("logLevel", Name("int")), Param("text", const_char_p), Param("args", Name("va_list"))],
                "Logging: Redirect trace log messages",
            ),
        ],
        functions=[
            Function(
                "InitWindow",
                VOID,
                [Param("width", Name("int")), Param("height", Name("int")), Param("title", const_char_p)],
                "Initialize window and OpenGL context",
            ),
            Function("CloseWindow", VOID, [], "Close window and unload OpenGL context"),
            Function(
                "TraceLog",
                VOID,
                [Param("logLevel", Name("int")), Param("text", const_char_p), Param("args", Variadic())],
                "Show trace log messages",
            ),
        ],
    )


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_TEXT


@pytest.fixture
def sample_json() -> str:
    return json.dumps(SAMPLE_DOCUMENT, indent=2)


@pytest.fixture
def sample_api() -> Api:
    return build_sample_api()

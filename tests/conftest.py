"""Shared fixtures: generators, a fake wire codec and a loader for generated code."""

import enum
import logging
import sys
import types
from dataclasses import dataclass
from typing import Any, List

import pytest

from wiregen.codegen.core.config import GeneratorConfig
from wiregen.codegen.languages.python import PythonGenerator
from wiregen.logging_config import PACKAGE_LOGGER

FAKE_WIRE_MODULE = "fakewire"


class DecodeError(Exception):
    pass


class TType(enum.IntEnum):
    BOOL = 2
    BYTE = 3
    DOUBLE = 4
    I16 = 6
    I32 = 8
    I64 = 10
    BINARY = 11
    STRUCT = 12
    MAP = 13
    SET = 14
    LIST = 15


@dataclass(frozen=True)
class Value:
    type: TType
    payload: Any

    @classmethod
    def from_bool(cls, value):
        return cls(TType.BOOL, bool(value))

    @classmethod
    def from_byte(cls, value):
        return cls(TType.BYTE, int(value))

    @classmethod
    def from_i16(cls, value):
        return cls(TType.I16, int(value))

    @classmethod
    def from_i32(cls, value):
        return cls(TType.I32, int(value))

    @classmethod
    def from_i64(cls, value):
        return cls(TType.I64, int(value))

    @classmethod
    def from_double(cls, value):
        return cls(TType.DOUBLE, float(value))

    @classmethod
    def from_binary(cls, value):
        if not isinstance(value, bytes):
            raise TypeError(f"binary payload must be bytes, got {type(value).__name__}")
        return cls(TType.BINARY, value)

    @classmethod
    def from_struct(cls, value):
        return cls(TType.STRUCT, value)

    @classmethod
    def from_map(cls, value):
        return cls(TType.MAP, value)

    @classmethod
    def from_set(cls, value):
        return cls(TType.SET, value)

    @classmethod
    def from_list(cls, value):
        return cls(TType.LIST, value)

    def _expect(self, ttype):
        if self.type != ttype:
            raise DecodeError(f"expected {ttype.name}, got {self.type.name}")
        return self.payload

    def get_bool(self):
        return self._expect(TType.BOOL)

    def get_byte(self):
        return self._expect(TType.BYTE)

    def get_i16(self):
        return self._expect(TType.I16)

    def get_i32(self):
        return self._expect(TType.I32)

    def get_i64(self):
        return self._expect(TType.I64)

    def get_double(self):
        return self._expect(TType.DOUBLE)

    def get_binary(self):
        return self._expect(TType.BINARY)

    def get_struct(self):
        return self._expect(TType.STRUCT)

    def get_map(self):
        return self._expect(TType.MAP)

    def get_set(self):
        return self._expect(TType.SET)

    def get_list(self):
        return self._expect(TType.LIST)


@dataclass(frozen=True)
class Field:
    id: int
    value: Value


@dataclass(frozen=True)
class Struct:
    fields: List[Field]


@dataclass(frozen=True)
class ValueList:
    value_type: TType
    values: List[Value]


@dataclass(frozen=True)
class MapItem:
    key: Value
    value: Value


@dataclass(frozen=True)
class MapItemList:
    key_type: TType
    value_type: TType
    items: List[MapItem]


@pytest.fixture
def fake_wire(monkeypatch):
    """Register the in-test codec as an importable module."""
    module = types.ModuleType(FAKE_WIRE_MODULE)
    for obj in (DecodeError, TType, Value, Field, Struct, ValueList, MapItem, MapItemList):
        setattr(module, obj.__name__, obj)
    monkeypatch.setitem(sys.modules, FAKE_WIRE_MODULE, module)
    return module


@pytest.fixture
def generator():
    return PythonGenerator()


@pytest.fixture
def plain_generator():
    """Generator without the ``__future__`` import, for exact-output checks."""
    return PythonGenerator(GeneratorConfig(future_annotations=False))


@pytest.fixture
def wire_generator():
    return PythonGenerator(GeneratorConfig(wire_module=FAKE_WIRE_MODULE))


@pytest.fixture
def load_generated(monkeypatch, fake_wire):
    """Execute generated source as a real module and return it."""

    def load(code: str, name: str = "generated_unit"):
        module = types.ModuleType(name)
        monkeypatch.setitem(sys.modules, name, module)
        exec(compile(code, f"<{name}>", "exec"), module.__dict__)
        return module

    return load


@pytest.fixture
def restore_package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield logger
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def shapes_model():
    return {
        "name": "shapes",
        "types": [
            {
                "kind": "struct",
                "name": "point",
                "fields": [
                    {"id": 1, "name": "x", "type": "double", "required": True},
                    {"id": 2, "name": "y", "type": "double", "required": True},
                ],
            },
            {"kind": "enum", "name": "color", "items": ["red", "green", {"name": "blue", "value": 10}]},
            {"kind": "typedef", "name": "point_list", "target": {"list": "point"}},
            {
                "kind": "struct",
                "name": "shape",
                "description": "A named polygon.",
                "fields": [
                    {"id": 1, "name": "name", "type": "string", "required": True},
                    {"id": 2, "name": "color", "type": "color"},
                    {"id": 3, "name": "points", "type": "point_list", "required": True},
                    {"id": 4, "name": "tags", "type": {"set": "string"}},
                    {"id": 5, "name": "attrs", "type": {"map": ["string", "i32"]}},
                    {"id": 6, "name": "grid", "type": {"list": {"list": "i32"}}},
                    {"id": 7, "name": "raw", "type": "binary"},
                    {"id": 8, "name": "visible", "type": "bool", "default": True},
                ],
            },
            {
                "kind": "exception",
                "name": "shape_not_found",
                "fields": [{"id": 1, "name": "message", "type": "string"}],
            },
        ],
        "constants": [
            {"name": "max_points", "type": "i32", "value": 64},
            {"name": "default_tags", "type": {"list": "string"}, "value": ["a", "b"]},
        ],
        "services": [
            {
                "name": "shape_service",
                "functions": [
                    {
                        "name": "get_shape",
                        "arguments": [{"id": 1, "name": "name", "type": "string"}],
                        "returns": "shape",
                        "exceptions": [
                            {"id": 1, "name": "not_found", "type": "shape_not_found"}
                        ],
                    },
                    {
                        "name": "ping",
                        "arguments": [],
                        "oneway": True,
                    },
                ],
            }
        ],
    }

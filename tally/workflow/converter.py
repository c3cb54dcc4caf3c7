"""Temporal DataConverter that carries ledger values without losing precision.

Wire forms:
  Decimal         {"__decimal__": "12.50"}   never a JSON float
  datetime        ISO-8601 string, read back with dateutil's isoparse
  Enum            its value
  tally dataclass {"__type__": "<module>.<Class>", <field>: ...}
  tuple           JSON array, rebuilt as a tuple

Only classes from the ledger's own type modules are rebuilt from a
``__type__`` tag.
"""

from __future__ import annotations

import dataclasses
import importlib
import json
import types
from datetime import datetime
from decimal import Decimal
from enum import Enum
from functools import cache
from typing import Any, Union, get_args, get_origin, get_type_hints

from dateutil.parser import isoparse
from temporalio.converter import (
    CompositePayloadConverter,
    DataConverter,
    DefaultPayloadConverter,
    JSONPlainPayloadConverter,
    JSONTypeConverter,
)

TYPE_TAG = "__type__"
DECIMAL_TAG = "__decimal__"

_DECODABLE_MODULES: frozenset[str] = frozenset({
    "tally.core.types",
    "tally.ledger.transactions",
    "tally.workflow.types",
})


def _to_json(obj: Any) -> Any:
    match obj:
        case None | bool() | int() | float() | str():
            return obj
        case Decimal():
            return {DECIMAL_TAG: str(obj)}
        case datetime():
            return obj.isoformat()
        case Enum():
            return obj.value
        case tuple() | list():
            return [_to_json(item) for item in obj]
        case dict():
            return {str(k): _to_json(v) for k, v in obj.items()}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        cls = type(obj)
        tagged: dict[str, Any] = {TYPE_TAG: f"{cls.__module__}.{cls.__qualname__}"}
        tagged.update(
            (f.name, _to_json(getattr(obj, f.name))) for f in dataclasses.fields(obj)
        )
        return tagged
    raise TypeError(f"no wire form for {type(obj).__name__}")


class TallyJSONEncoder(json.JSONEncoder):
    def default(self, o: Any) -> Any:
        return _to_json(o)


@cache
def _decodable_class(fqn: str) -> type | None:
    module_name, _, class_name = fqn.rpartition(".")
    if module_name not in _DECODABLE_MODULES:
        return None
    cls = getattr(importlib.import_module(module_name), class_name, None)
    if isinstance(cls, type) and dataclasses.is_dataclass(cls):
        return cls
    return None


def _without_none(hint: Any) -> Any:
    if get_origin(hint) in (Union, types.UnionType):
        rest = [a for a in get_args(hint) if a is not type(None)]
        if len(rest) == 1:
            return rest[0]
    return hint


def _decode_tagged(value: dict[str, Any]) -> Any:
    if DECIMAL_TAG in value:
        return Decimal(value[DECIMAL_TAG])
    cls = _decodable_class(value[TYPE_TAG])
    if cls is None:
        raise TypeError(f"Refusing to decode unknown type {value[TYPE_TAG]!r}")
    hints = get_type_hints(cls)
    return cls(**{
        f.name: _from_json(hints.get(f.name, Any), value[f.name])
        for f in dataclasses.fields(cls)
        if f.name in value
    })


def _from_json(hint: Any, value: Any) -> Any:
    """Rebuild a value from its wire form, guided by the field's type hint."""
    if value is None:
        return None
    hint = _without_none(hint)
    match value:
        case dict() if TYPE_TAG in value or DECIMAL_TAG in value:
            return _decode_tagged(value)
        case dict():
            args = get_args(hint)
            value_hint = args[1] if len(args) == 2 else Any
            return {k: _from_json(value_hint, v) for k, v in value.items()}
        case list():
            args = get_args(hint)
            item_hint = args[0] if args else Any
            return tuple(_from_json(item_hint, item) for item in value)
        case str() if hint is datetime:
            return isoparse(value)
    if isinstance(hint, type) and issubclass(hint, Enum):
        return hint(value)
    if hint is Decimal:
        return Decimal(str(value))
    return value


class TallyJSONTypeConverter(JSONTypeConverter):
    """Hands tagged values to _from_json; everything else to Temporal."""

    def to_typed_value(self, hint: type, value: Any) -> Any:
        if isinstance(value, dict) and (TYPE_TAG in value or DECIMAL_TAG in value):
            return _from_json(hint, value)
        if hint is Decimal and isinstance(value, (int, str)):
            return Decimal(value)
        return JSONTypeConverter.Unhandled


class TallyPayloadConverter(CompositePayloadConverter):
    def __init__(self) -> None:
        defaults = [
            c for c in DefaultPayloadConverter.default_encoding_payload_converters
            if not isinstance(c, JSONPlainPayloadConverter)
        ]
        super().__init__(
            *defaults,
            JSONPlainPayloadConverter(
                encoder=TallyJSONEncoder,
                custom_type_converters=[TallyJSONTypeConverter()],
            ),
        )


TALLY_DATA_CONVERTER = DataConverter(payload_converter_class=TallyPayloadConverter)

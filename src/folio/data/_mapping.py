"""Row-to-dataclass mapping with type coercion.

Converts raw SQLite rows (dicts) into typed frozen dataclasses using
field introspection. SQLite hands back text and integers only, so
fields annotated ``bool`` coerce ``0``/``1``, and fields annotated
``dict`` or ``list`` decode the JSON text stored in the column.
"""

import dataclasses
import json
import types
from functools import cache
from typing import Any, get_args, get_origin, get_type_hints


def _decode_json(value: Any) -> Any:
    return json.loads(value) if isinstance(value, (str, bytes)) else value


_COERCIBLE: dict[type, Any] = {
    int: lambda v: int(v) if v != "" else 0,
    float: lambda v: float(v) if v != "" else 0.0,
    bool: lambda v: bool(int(v)) if isinstance(v, str) else bool(v),
    str: str,
    dict: _decode_json,
    list: _decode_json,
}


@cache
def _coercion_map(cls: type) -> dict[str, type | None]:
    """Build a {field_name: target_type} map for coercible fields.

    ``X | None`` unwraps to ``X``; parameterized generics such as
    ``dict[str, Any]`` coerce by their origin.
    """
    hints = get_type_hints(cls)
    result: dict[str, type | None] = {}
    for f in dataclasses.fields(cls):
        annotation = hints.get(f.name)
        if get_origin(annotation) is types.UnionType:
            args = [a for a in get_args(annotation) if a is not type(None)]
            annotation = args[0] if len(args) == 1 else None
        annotation = get_origin(annotation) or annotation
        result[f.name] = annotation if annotation in _COERCIBLE else None
    return result


def _coerce(value: Any, target: type | None) -> Any:
    if target is None or value is None or isinstance(value, target):
        return value
    return _COERCIBLE[target](value)


def map_row[T](cls: type[T], row: dict[str, Any]) -> T:
    """Map a dict row to a dataclass instance.

    Columns without a matching field are ignored, so ``SELECT *`` is fine.
    Raises ``TypeError`` if *cls* is not a dataclass or a required field
    is missing from the row.
    """
    if not dataclasses.is_dataclass(cls):
        msg = f"{cls.__name__} is not a dataclass; folio.data maps rows to dataclasses"
        raise TypeError(msg)

    coercion = _coercion_map(cls)
    return cls(**{k: _coerce(v, coercion[k]) for k, v in row.items() if k in coercion})


def map_rows[T](cls: type[T], rows: list[dict[str, Any]]) -> list[T]:
    """Map a list of dict rows to dataclass instances."""
    return [map_row(cls, row) for row in rows]

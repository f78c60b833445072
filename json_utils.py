"""
JSON helpers backed by orjson
=============================

Keeps the standard json call shape (dumps/loads) while serializing through orjson.
orjson.dumps returns bytes; these helpers return str.
"""

import orjson
from typing import Any, Callable, Optional


def dumps(obj: Any, ensure_ascii: bool = True, indent: Optional[int] = None, default: Optional[Callable] = None) -> str:
    """
    Serialize obj to a JSON string.

    Args:
        obj: Object to serialize
        ensure_ascii: Accepted for json compatibility; orjson always emits UTF-8
        indent: Any non-None value pretty-prints with two spaces
        default: Callable for objects orjson cannot serialize natively

    Returns:
        JSON string
    """
    option = orjson.OPT_NON_STR_KEYS
    if indent is not None:
        option |= orjson.OPT_INDENT_2
    return orjson.dumps(obj, default=default, option=option).decode("utf-8")


def loads(s: Any) -> Any:
    """Deserialize a JSON str or bytes payload."""
    return orjson.loads(s)


JSONDecodeError = orjson.JSONDecodeError

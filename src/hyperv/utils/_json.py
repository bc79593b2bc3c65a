from typing import cast

import orjson


def load_json(json_str: str | bytes) -> dict[str, object] | list[object] | None:
    """Load and parse a JSON string.

    Args:
        json_str: The JSON document to parse.

    Returns:
        The parsed JSON data as a dictionary or list, or None if parsing fails.
    """
    try:
        return cast("dict[str, object] | list[object]", orjson.loads(json_str))
    except orjson.JSONDecodeError:
        return None


def dump_json(data: object, *, indent: bool = True) -> bytes:
    """Serialize data (dicts, lists, dataclasses, enums) to JSON bytes.

    Raises:
        orjson.JSONEncodeError: If the data contains unsupported types.
    """
    options = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(data, option=options)

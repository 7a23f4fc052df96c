"""Built-in parameterized rules.

Parameters arrive as strings split from the annotation, e.g.
"length(2|20)" calls string_length(text, "2", "20"). A rule given the
wrong number of parameters, or parameters that are not numbers where
numbers are expected, never validates.
"""

import re

from fieldrules.registry import ParamPredicate, RuleRegistry


def _to_int(text: str) -> int | None:
    try:
        return int(text.strip())
    except ValueError:
        return None


def _to_float(text: str) -> float | None:
    try:
        return float(text.strip())
    except ValueError:
        return None


def _bounds(params: tuple[str, ...]) -> tuple[int, int] | None:
    if len(params) != 2:
        return None
    low, high = _to_int(params[0]), _to_int(params[1])
    if low is None or high is None:
        return None
    return low, high


def string_length(text: str, *params: str) -> bool:
    """Character count within [min, max]: length(min|max)."""
    bounds = _bounds(params)
    return bounds is not None and bounds[0] <= len(text) <= bounds[1]


def byte_length(text: str, *params: str) -> bool:
    """UTF-8 byte count within [min, max]: bytelength(min|max)."""
    bounds = _bounds(params)
    return bounds is not None and bounds[0] <= len(text.encode("utf-8")) <= bounds[1]


def min_string_length(text: str, *params: str) -> bool:
    low = _to_int(params[0]) if len(params) == 1 else None
    return low is not None and len(text) >= low


def max_string_length(text: str, *params: str) -> bool:
    high = _to_int(params[0]) if len(params) == 1 else None
    return high is not None and len(text) <= high


def in_range(text: str, *params: str) -> bool:
    """Numeric value within [min, max]: range(min|max).

    The bounds may be given in either order.
    """
    if len(params) != 2:
        return False
    value, low, high = _to_float(text), _to_float(params[0]), _to_float(params[1])
    if value is None or low is None or high is None:
        return False
    if low > high:
        low, high = high, low
    return low <= value <= high


def is_in(text: str, *params: str) -> bool:
    """Membership in the "|"-separated set: in(a|b|c)."""
    return text in params


def matches(text: str, *params: str) -> bool:
    """Regular expression search: matches(^[a-z]+$).

    A pattern containing "|" is split by the annotation grammar; it is
    rejoined here so alternation still works.
    """
    if not params:
        return False
    try:
        return re.search("|".join(params), text) is not None
    except re.error:
        return False


_HASH_LENGTHS = {
    "crc32": 8,
    "crc32b": 8,
    "md4": 32,
    "md5": 32,
    "ripemd128": 32,
    "tiger128": 32,
    "sha1": 40,
    "ripemd160": 40,
    "tiger160": 40,
    "tiger192": 48,
    "sha256": 64,
    "sha384": 96,
    "sha512": 128,
}


def is_hash(text: str, *params: str) -> bool:
    """Lowercase hex digest of the named algorithm: hash(sha256)."""
    if len(params) != 1:
        return False
    length = _HASH_LENGTHS.get(params[0].lower())
    if length is None:
        return False
    return re.fullmatch(f"[a-f0-9]{{{length}}}", text) is not None


PARAM_RULES: dict[str, ParamPredicate] = {
    "length": string_length,
    "runelength": string_length,
    "stringlength": string_length,
    "bytelength": byte_length,
    "minstringlength": min_string_length,
    "maxstringlength": max_string_length,
    "range": in_range,
    "in": is_in,
    "matches": matches,
    "hash": is_hash,
}


def register_param_rules() -> None:
    """Register every built-in parameterized rule."""
    for name, predicate in PARAM_RULES.items():
        RuleRegistry.register_param(name, predicate)

"""
Value helpers shared by the normalizers and formatters.

Everything here is pure: no logging, no mutation of the input objects.
"""
import re
from typing import Any, Iterable

_MISSING = object()

HTML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "/": "&#x2F;",
}
_HTML_ESCAPE_RE = re.compile(r"[&<>\"'/]")

# Sub-keys that carry the actual sequence when a list arrives wrapped in an object
ARRAY_CONTAINER_KEYS = ("items", "list", "data", "values")


def escape_html(text: Any) -> str:
    """Entity-encode ``& < > " ' /``. ``None`` renders as an empty string."""
    if text is None:
        return ""
    return _HTML_ESCAPE_RE.sub(lambda m: HTML_ESCAPES[m.group(0)], str(text))


def _lookup(obj: Any, path: str) -> Any:
    current = obj
    for part in path.split("."):
        if isinstance(current, dict):
            if part not in current:
                return _MISSING
            current = current[part]
        elif isinstance(current, list) and part.isdigit():
            index = int(part)
            if index >= len(current):
                return _MISSING
            current = current[index]
        else:
            return _MISSING
    return current


def extract_value(obj: Any, *candidate_keys: str) -> Any:
    """
    Return the first defined value among several candidate key paths.

    Dotted paths walk nested dicts (and list indexes), e.g.
    ``extract_value(data, "projectDefinition.background", "background")``.
    Returns None when no candidate resolves to a non-None value.
    """
    for key in candidate_keys:
        value = _lookup(obj, key)
        if value is not _MISSING and value is not None:
            return value
    return None


def extract_text(obj: Any, *candidate_keys: str, default: str = "") -> str:
    """Like extract_value but only accepts non-blank scalars and returns a string."""
    for key in candidate_keys:
        value = _lookup(obj, key)
        if value is _MISSING or value is None or isinstance(value, (dict, list)):
            continue
        text = str(value).strip()
        if text:
            return text
    return default


def extract_array(value: Any, delimiter: str = "\n") -> list:
    """
    Coerce a loosely-typed value into an ordered list.

    - None -> []
    - list/tuple -> same order with None entries dropped
    - str -> split on ``delimiter``, trimmed, blank segments dropped
    - dict with items/list/data/values -> that sub-sequence
    - any other dict or scalar -> single-element list
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [item for item in value if item is not None]
    if isinstance(value, str):
        return [part.strip() for part in value.split(delimiter) if part.strip()]
    if isinstance(value, dict):
        for key in ARRAY_CONTAINER_KEYS:
            if key in value:
                return extract_array(value[key], delimiter)
        return [value] if value else []
    return [value]


def first_non_empty(*values: Any) -> Any:
    for value in values:
        if value not in (None, "", [], {}):
            return value
    return None


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def format_number(value: Any) -> str:
    """Integers get thousands separators; other numbers are fixed to two decimals."""
    if not is_number(value):
        return "" if value is None else str(value)
    if isinstance(value, int) or float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:.2f}"


def clamp_percentage(value: Any) -> float:
    """Clamp to [0, 100]; unparsable values count as 0."""
    try:
        number = float(str(value).replace("%", "").strip()) if not is_number(value) else float(value)
    except (TypeError, ValueError):
        return 0.0
    if number != number:  # NaN
        return 0.0
    return max(0.0, min(100.0, number))


def format_percentage(value: Any) -> str:
    pct = clamp_percentage(value)
    return f"{format_number(pct)}%"


def parse_amount(value: Any) -> float | None:
    """Pull the first number out of a money-like string ("$1.2M", "£500,000")."""
    if is_number(value):
        return float(value)
    if not isinstance(value, str):
        return None
    match = re.search(r"(\d[\d,]*(?:\.\d+)?)\s*([kKmMbB])?", value)
    if not match:
        return None
    amount = float(match.group(1).replace(",", ""))
    multiplier = {"k": 1_000, "m": 1_000_000, "b": 1_000_000_000}.get((match.group(2) or "").lower(), 1)
    return amount * multiplier


def detect_currency(value: Any, default: str = "$") -> str:
    text = str(value or "")
    for symbol in ("£", "€", "$"):
        if symbol in text:
            return symbol
    return default


def format_header(text: Any) -> str:
    """Convert snake_case / camelCase keys to Title Case labels."""
    label = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", str(text or "").replace("_", " "))
    return " ".join(word[:1].upper() + word[1:] for word in label.split())


def generate_id(text: Any) -> str:
    """Slug used for section anchors."""
    slug = re.sub(r"[^a-z0-9]+", "-", str(text or "").lower()).strip("-")
    return slug or "section"


def truncate(text: Any, limit: int) -> str:
    value = "" if text is None else str(text)
    return value if len(value) <= limit else value[:limit] + "..."


def as_text(value: Any) -> str:
    """Render a scalar, list or record as readable plain text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if is_number(value):
        return format_number(value)
    if isinstance(value, (list, tuple)):
        return ", ".join(as_text(item) for item in value if item is not None)
    if isinstance(value, dict):
        for key in ("name", "title", "description", "text", "value"):
            if value.get(key):
                return as_text(value[key])
        return "; ".join(f"{format_header(k)}: {as_text(v)}" for k, v in value.items())
    return str(value)


_PLACEHOLDER_RE = re.compile(
    r"^(tbd|tbc|n/a|not specified|unknown)$|to be (defined|determined|confirmed|provided)|^\[[A-Z _-]+\]$",
    re.IGNORECASE,
)


def is_placeholder(value: Any) -> bool:
    """True for the default-fill strings the normalizers use ("TBD", "... to be defined", "[EXECUTIVE]")."""
    return isinstance(value, str) and bool(_PLACEHOLDER_RE.search(value.strip()))


def count_where(items: Iterable[dict], key: str, *values: str) -> int:
    wanted = {v.lower() for v in values}
    return sum(1 for item in items if str(item.get(key, "")).lower() in wanted)

"""
Building blocks for the per-type shape normalizers.

A normalizer must be total (any input, including None, strings and
double-wrapped payloads, yields a complete structure) and idempotent
(feeding its output back in returns an equal structure). These helpers keep
both properties: values are always read from the canonical key first, then
from the aliases in ``aliases.FIELD_ALIASES``, and coercions are stable.
"""
import copy
import json
import logging
import re
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from docgen.services.documents.normalizers.aliases import FIELD_ALIASES
from docgen.services.documents.risk import BANDS, LEVEL_NAMES
from docgen.services.documents.toolkit import as_text, extract_array, extract_value, is_number

logger = logging.getLogger(__name__)

ENVELOPE_KEYS = ("content", "plan", "analysis", "data", "document")
DEFAULTED_KEY = "defaultedFields"
MAX_ENVELOPE_DEPTH = 6

# Rating words the formatters compute themselves; never attributed to a default
RATING_WORDS = set(LEVEL_NAMES.values()) | {band for _, band, _, _ in BANDS}


def _parse_json_text(value: Any) -> Any:
    if isinstance(value, str):
        text = value.strip()
        if text[:1] in ("{", "[") and text[-1:] in ("}", "]"):
            try:
                return json.loads(text)
            except ValueError:
                return value
    return value


def unwrap(raw: Any, envelopes: Sequence[str] = ENVELOPE_KEYS) -> Tuple[dict, str]:
    """
    Peel known envelopes (``{"content": {...}}``, ``{"plan": "..."}``, JSON
    strings) and return ``(innermost dict, raw text found on the way)``.

    Sibling keys of an envelope are kept as fallbacks underneath the inner
    object, so ``{"content": {...}, "version": "2"}`` keeps ``version``.
    """
    current = _parse_json_text(raw)
    text = ""
    for _ in range(MAX_ENVELOPE_DEPTH):
        if isinstance(current, str):
            return {}, text or current.strip()
        if isinstance(current, list):
            return {"items": current}, text
        if not isinstance(current, dict):
            return {}, text

        for key in envelopes:
            if key not in current:
                continue
            inner = _parse_json_text(current[key])
            siblings = {k: v for k, v in current.items() if k != key}
            if isinstance(inner, dict):
                current = {**siblings, **inner}
                break
            if isinstance(inner, str) and inner.strip():
                text = text or inner.strip()
                current = siblings
                break
            if isinstance(inner, list) and key in ("data", "content"):
                current = {**siblings, "items": inner}
                break
        else:
            return current, text
    return (current if isinstance(current, dict) else {}), text


class FieldReader:
    """Reads canonical fields from loosely-shaped input using the alias table."""

    def __init__(self, data: Mapping, document_type: str):
        self.data = data if isinstance(data, Mapping) else {}
        self.aliases = FIELD_ALIASES.get(document_type, {})
        # Fields filled from defaults, carried across passes so re-normalizing keeps the record
        self.defaulted = {str(name) for name in extract_array(self.data.get(DEFAULTED_KEY))}

    def candidates(self, canonical: str) -> Tuple[str, ...]:
        return (canonical,) + tuple(self.aliases.get(canonical, ()))

    def _fallback(self, canonical: str, default: Any) -> Any:
        if default not in (None, "", [], {}):
            self.defaulted.add(canonical)
        return copy.deepcopy(default)

    def value(self, canonical: str, default: Any = None) -> Any:
        found = extract_value(self.data, *self.candidates(canonical))
        if found in (None, "", [], {}):
            return self._fallback(canonical, default)
        return found

    def text(self, canonical: str, default: str = "") -> str:
        found = self.value(canonical)
        if isinstance(found, (list, tuple)):
            found = "\n".join(as_text(item) for item in found if item is not None)
        elif isinstance(found, dict):
            found = as_text(found)
        text = "" if found is None else str(found).strip()
        return text or self._fallback(canonical, default)

    def finish(self, structure: dict) -> dict:
        """Attach the default-fill record to a normalized structure."""
        structure[DEFAULTED_KEY] = sorted(self.defaulted)
        return structure

    def items(
        self,
        canonical: str,
        default: Optional[Iterable[Any]] = None,
        item: Optional[Callable[[Any, int], Any]] = None,
        delimiter: str = "\n",
    ) -> list:
        values = extract_array(self.value(canonical), delimiter)
        if item is not None:
            values = [item(value, index) for index, value in enumerate(values)]
            values = [value for value in values if value not in (None, "", {})]
        if not values and default is not None:
            values = self._fallback(canonical, list(default))
            if item is not None:
                values = [item(value, index) for index, value in enumerate(values)]
        return values

    def strings(self, canonical: str, default: Optional[Iterable[str]] = None) -> List[str]:
        return self.items(canonical, default, item=lambda value, _: as_text(value).strip())

    def mapping(self, canonical: str, default: Optional[Mapping] = None) -> dict:
        found = self.value(canonical)
        if isinstance(found, Mapping) and found:
            return dict(found)
        return dict(self._fallback(canonical, dict(default or {})))

    def number(self, canonical: str, default: Optional[float] = None) -> Optional[float]:
        found = self.value(canonical)
        if is_number(found):
            return found
        if isinstance(found, str):
            match = re.search(r"-?\d+(?:\.\d+)?", found.replace(",", ""))
            if match:
                number = float(match.group(0))
                return int(number) if number.is_integer() else number
        return default


def record(
    name_key: str = "name",
    defaults: Optional[Mapping[str, Any]] = None,
    aliases: Optional[Mapping[str, Sequence[str]]] = None,
) -> Callable[[Any, int], dict]:
    """
    Item coercer for record lists: strings become ``{name_key: text}``, dicts
    get their aliased keys copied to canonical names and missing keys filled
    from ``defaults``. The alias keys themselves are left in place.
    """
    defaults = dict(defaults or {})
    aliases = dict(aliases or {})

    def coerce(value: Any, index: int) -> dict:
        if isinstance(value, Mapping):
            result = dict(value)
        elif value is None or (isinstance(value, str) and not value.strip()):
            return {}
        else:
            result = {name_key: as_text(value).strip()}
        for canonical, candidates in aliases.items():
            if result.get(canonical) in (None, ""):
                found = extract_value(result, *candidates)
                if found not in (None, ""):
                    result[canonical] = found
        for key, default in defaults.items():
            if result.get(key) in (None, "", []):
                result[key] = default(index) if callable(default) else copy.deepcopy(default)
        return result

    return coerce


def keep_alias(structure: dict, canonical: str, *legacy_names: str) -> dict:
    """Mirror a canonical field under its legacy names for older callers."""
    for name in legacy_names:
        structure[name] = copy.deepcopy(structure[canonical])
    return structure


def default_texts(data: Mapping, min_length: int = 3) -> Set[str]:
    """
    Text values that only occur in default-filled fields of a normalized
    structure (per its ``defaultedFields`` record). A value that also occurs
    in an authored field is left out, so authored content is never flagged.
    """
    if not isinstance(data, Mapping):
        return set()
    defaulted = {str(name) for name in extract_array(data.get(DEFAULTED_KEY))}
    if not defaulted:
        return set()
    filled: Set[str] = set()
    authored: Set[str] = set()
    _collect_texts(data, "", defaulted, filled, authored, False)
    return {
        text for text in filled - authored
        if len(text) >= min_length and text not in RATING_WORDS
    }


def _collect_texts(value: Any, path: str, defaulted: Set[str], filled: Set[str], authored: Set[str], inside: bool) -> None:
    inside = inside or path in defaulted
    if isinstance(value, Mapping):
        lowered = {}
        for key in value:
            lowered.setdefault(str(key).lower(), str(key))
        for key, child in value.items():
            key = str(key)
            if not path and key == DEFAULTED_KEY:
                continue
            # Case-variant copies written by keep_alias mirror the canonical field
            if lowered[key.lower()] != key:
                continue
            _collect_texts(child, f"{path}.{key}" if path else key, defaulted, filled, authored, inside)
    elif isinstance(value, (list, tuple)):
        for child in value:
            _collect_texts(child, path, defaulted, filled, authored, inside)
    elif isinstance(value, str) and value.strip():
        (filled if inside else authored).add(value.strip())


def split_sentences(text: str, limit: int = 6) -> List[str]:
    parts = re.split(r"(?:\n+|(?<=[.!?])\s+)(?:[-*•]\s*|\d+[.)]\s*)?", text or "")
    return [part.strip(" -*•") for part in parts if len(part.strip()) > 3][:limit]


def extract_bullets(text: str) -> List[str]:
    """Markdown-ish bullet or numbered lines from free text."""
    return [
        match.strip()
        for match in re.findall(r"^\s*(?:[-*•]|\d+[.)])\s+(.+)$", text or "", re.MULTILINE)
        if match.strip()
    ]


def extract_headed_section(text: str, heading: str) -> str:
    """
    Body of an upper-case or markdown heading such as ``EXECUTIVE SUMMARY``
    or ``## Key Findings`` up to the next heading.
    """
    if not text:
        return ""
    pattern = re.compile(
        rf"^[ \t]*(?:#+[ \t]*)?(?:\d+\.[ \t]*)?(?i:{re.escape(heading)})[ \t]*:?[ \t]*$(.*?)"
        rf"(?=^[ \t]*(?:#+[ \t]*)?(?:\d+\.[ \t]*)?[A-Z][A-Z &/-]{{3,}}[ \t]*:?[ \t]*$|^[ \t]*#+[ \t]|\Z)",
        re.MULTILINE | re.DOTALL,
    )
    match = pattern.search(text)
    return match.group(1).strip() if match else ""


def log_zero_match(document_type: str, what: str) -> None:
    logger.info(f"[normalizer] {document_type}: no {what} recognised in raw text, using defaults")

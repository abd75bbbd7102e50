"""
Validation of the suggestion generator's output.

The generator is untrusted: its text is parsed, checked against a fixed
schema, then every chip is checked against the catalog vocabulary.
Structural problems fail the whole turn; a chip with an unknown value is
only dropped (with a diagnostic) so one bad value never costs the others.
"""
from __future__ import annotations
from typing import Any, List, Optional
import json, logging, math, re

from pydantic import ValidationError

from schemas import (
    CHIP_CLASSES, INTENT_MODES, REPLACE_CATEGORIES,
    CatalogFacets, RawChip, SuggestionPayload, ValidationResult,
)
from services.errors import CatalogMismatchError, ParseError, SchemaError
from services.mappings import CHIP_TYPE_FILTER_KEYS

log = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.I)
_DECODER = json.JSONDecoder()

# ---------------- parsing ----------------

def _strip_code_fence(text: str) -> str:
    m = _CODE_FENCE.search(text)
    return m.group(1) if m else text


def parse_suggestion(raw: str) -> Any:
    """Strip ``` fences, then decode the first top-level {...} object in the text."""
    text = _strip_code_fence((raw or "").strip())
    start = text.find("{")
    if start == -1:
        raise ParseError("Failed to parse JSON: no object found in suggestion text")
    try:
        obj, _ = _DECODER.raw_decode(text, start)
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse JSON: {e.msg} (char {e.pos})") from e
    return obj


def parse_payload(data: Any) -> SuggestionPayload:
    try:
        return SuggestionPayload.model_validate(data)
    except ValidationError as e:
        issues = ", ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        )
        raise SchemaError(f"Schema validation failed: {issues}") from e

# ---------------- catalog membership ----------------

def valid_values_for_type(chip_type: str, facets: CatalogFacets) -> List[str]:
    return facets.values_for(chip_type)


def _is_member(chip_type: str, value: str, values: List[str]) -> bool:
    if chip_type == "size":
        return value.upper() in {v.upper() for v in values}
    v = value.casefold()
    return any(v == x.casefold() for x in values)


def validate_chip(raw: RawChip, facets: CatalogFacets):
    """Turn a wire chip into a typed chip, or raise CatalogMismatchError."""
    kind = raw.type.replace("_", " ")
    legal_keys = CHIP_TYPE_FILTER_KEYS[raw.type]
    if raw.filter_key not in legal_keys:
        raise CatalogMismatchError(
            f'Invalid filterKey "{raw.filter_key}" for {kind} chip. Valid keys are: {", ".join(legal_keys)}',
            chip=raw,
        )
    value = raw.filter_value
    if not isinstance(value, str):
        raise CatalogMismatchError(
            f"{kind.capitalize()} value must be string, got {type(value).__name__}", chip=raw)

    values = valid_values_for_type(raw.type, facets)
    if not _is_member(raw.type, value, values):
        raise CatalogMismatchError(
            f'Invalid {kind} "{value}", valid values are: {", ".join(values) or "(none)"}', chip=raw)

    return CHIP_CLASSES[raw.type](
        id=raw.id, label=raw.label, filter_value=value, filter_key=raw.filter_key)


def normalize_chip(chip, facets: CatalogFacets):
    """Rewrite filter_value to the catalog's casing. Idempotent; unknown values pass through."""
    target = chip.filter_value.upper() if chip.type == "size" else chip.filter_value.casefold()
    for v in valid_values_for_type(chip.type, facets):
        candidate = v.upper() if chip.type == "size" else v.casefold()
        if candidate == target:
            return chip if v == chip.filter_value else chip.model_copy(update={"filter_value": v})
    return chip

# ---------------- per-turn extras ----------------

def _intent_mode(value: Any, errors: List[str]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in INTENT_MODES:
        return value.strip().lower()
    errors.append(f'Unknown intentMode "{value}", ignored (valid: {", ".join(INTENT_MODES)})')
    return None


def _replace_categories(value: Any, errors: List[str]) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        errors.append(f"replaceCategories must be a list, got {type(value).__name__}")
        return []
    out: List[str] = []
    for item in value:
        cat = item.strip().lower() if isinstance(item, str) else None
        if cat in REPLACE_CATEGORIES:
            if cat not in out:
                out.append(cat)
        else:
            errors.append(f'Unknown replace category "{item}", ignored')
    return out


def _price(value: Any, name: str, errors: List[str], upper: bool = False) -> Optional[int]:
    """Whole-unit price; an upper bound rounds down and a lower bound rounds up."""
    if value is None:
        return None
    if isinstance(value, bool):
        errors.append(f"{name} must be a number, got bool")
        return None
    if isinstance(value, str):
        cleaned = value.strip().lstrip("$").replace(",", "")
        try:
            value = float(cleaned)
        except ValueError:
            errors.append(f'{name} must be a number, got "{value}"')
            return None
    if not isinstance(value, (int, float)) or (isinstance(value, float) and not math.isfinite(value)):
        errors.append(f"{name} must be a finite number, got {value!r}")
        return None
    if value < 0:
        errors.append(f"{name} must be a non-negative number, got {value!r}")
        return None
    return math.floor(value) if upper else math.ceil(value)

# ---------------- entry point ----------------

def validate(raw: Any, facets: CatalogFacets) -> ValidationResult:
    """
    Validate a suggestion (raw text or already-decoded data) against the schema and catalog.
    Never raises: parse/schema failures come back as success=False with one error.
    """
    try:
        data = parse_suggestion(raw) if isinstance(raw, str) else raw
        payload = parse_payload(data)
    except (ParseError, SchemaError) as e:
        log.warning(f"SUGGESTION_REJECTED | kind={type(e).__name__} | error={e}")
        return ValidationResult(success=False, errors=[str(e)])

    accepted, rejected, errors = [], [], []
    for raw_chip in payload.chips:
        try:
            accepted.append(validate_chip(raw_chip, facets))
        except CatalogMismatchError as e:
            rejected.append(e.chip)
            errors.append(str(e))

    intent_mode = _intent_mode(payload.intent_mode, errors)
    categories = _replace_categories(payload.replace_categories, errors)
    min_price = _price(payload.min_price, "minPrice", errors)
    max_price = _price(payload.max_price, "maxPrice", errors, upper=True)
    question = payload.price_question if isinstance(payload.price_question, str) else None

    if rejected:
        log.info(f"CHIPS_REJECTED | ids={[c.id for c in rejected]}")
    log.info(f"SUGGESTION_VALIDATED | accepted={len(accepted)} | rejected={len(rejected)} | errors={len(errors)}")

    return ValidationResult(
        success=True,
        accepted=accepted,
        rejected=rejected,
        errors=errors,
        assistant_message=payload.message,
        intent_mode=intent_mode,
        replace_categories=categories,
        min_price=min_price,
        max_price=max_price,
        price_question=question,
    )

"""Deduction limits and unused-headroom reporting."""

import logging
from decimal import Decimal
from typing import Any, NamedTuple

from config import load_yaml_config
from src.models import DeductionHeadroom, DeductionProfile, resolve_profile_field

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")


class DeductionLimit(NamedTuple):
    """Statutory cap for one deduction category."""

    category: str
    field: str  # canonical profile path, e.g. "deductions.section_80c"
    limit: Decimal | None  # None = uncapped


class AdviceConfig(NamedTuple):
    limits: tuple[DeductionLimit, ...]
    small_difference_threshold: Decimal


def _to_decimal(value: Any) -> Decimal | None:
    return None if value is None else Decimal(str(value))


def load_advice_config(filename: str) -> AdviceConfig:
    """Load deduction limits and recommendation thresholds from config/.

    Raises:
        ValueError: if an entry names an unknown profile field.
    """
    config = load_yaml_config(filename)

    limits: list[DeductionLimit] = []
    for entry in config.get("deduction_limits", []):
        field = resolve_profile_field(str(entry["field"]))
        if not field.startswith("deductions."):
            raise ValueError(f"Deduction limit {entry['category']!r} points at {field}")
        limits.append(DeductionLimit(
            category=entry["category"],
            field=field,
            limit=_to_decimal(entry.get("limit")),
        ))
    threshold = config.get("recommendations", {}).get("small_difference_threshold", 0)

    logger.info("Loaded %d deduction limits from %s", len(limits), filename)
    return AdviceConfig(limits=tuple(limits), small_difference_threshold=Decimal(str(threshold)))


def claimed_amount(deductions: DeductionProfile, field: str) -> Decimal:
    """Amount claimed for a canonical deduction path; 0 when absent."""
    name = field.removeprefix("deductions.")
    if name.startswith("others."):
        return deductions.others.get(name[len("others."):], _ZERO)
    return getattr(deductions, name)


def potential_deductions(
    deductions: DeductionProfile,
    limits: tuple[DeductionLimit, ...],
) -> list[DeductionHeadroom]:
    """Report, per category, how much more could still be deducted."""
    headroom: list[DeductionHeadroom] = []

    for item in limits:
        current = claimed_amount(deductions, item.field)
        remaining = None if item.limit is None else max(_ZERO, item.limit - current)
        headroom.append(DeductionHeadroom(
            category=item.category,
            current=current,
            limit=item.limit,
            remaining=remaining,
        ))

    return headroom

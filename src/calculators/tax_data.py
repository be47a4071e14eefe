"""Indian income tax constants: regime slabs and deduction caps per financial year.

Hardcoded Python constants (not DB-driven). Slabs change with each Union
Budget; a year missing from FINANCIAL_YEARS falls back to DEFAULT_RULES.
"""

import logging
from decimal import Decimal
from typing import NamedTuple

logger = logging.getLogger(__name__)


class Slab(NamedTuple):
    """A single income tax slab, cumulative from the previous upper bound."""

    upper_bound: Decimal | None  # None = no cap
    rate: Decimal


class FinancialYearRules(NamedTuple):
    """All tax parameters for a single Indian financial year."""

    old_regime_slabs: tuple[Slab, ...]
    new_regime_slabs: tuple[Slab, ...]
    standard_deduction: Decimal
    max_section_80c: Decimal
    max_section_80d: Decimal


# Health and Education Cess, both regimes
CESS_RATE = Decimal("0.04")

_OLD_REGIME_SLABS = (
    Slab(Decimal("250000"), Decimal("0")),
    Slab(Decimal("500000"), Decimal("0.05")),
    Slab(Decimal("1000000"), Decimal("0.20")),
    Slab(None, Decimal("0.30")),
)

# Budget 2023 new regime
_NEW_REGIME_SLABS_2023 = (
    Slab(Decimal("300000"), Decimal("0")),
    Slab(Decimal("600000"), Decimal("0.05")),
    Slab(Decimal("900000"), Decimal("0.10")),
    Slab(Decimal("1200000"), Decimal("0.15")),
    Slab(Decimal("1500000"), Decimal("0.20")),
    Slab(None, Decimal("0.30")),
)

# Pre-Budget 2023 new regime (Section 115BAC as introduced)
_NEW_REGIME_SLABS_2020 = (
    Slab(Decimal("250000"), Decimal("0")),
    Slab(Decimal("500000"), Decimal("0.05")),
    Slab(Decimal("750000"), Decimal("0.10")),
    Slab(Decimal("1000000"), Decimal("0.15")),
    Slab(Decimal("1250000"), Decimal("0.20")),
    Slab(Decimal("1500000"), Decimal("0.25")),
    Slab(None, Decimal("0.30")),
)

DEFAULT_RULES = FinancialYearRules(
    old_regime_slabs=_OLD_REGIME_SLABS,
    new_regime_slabs=_NEW_REGIME_SLABS_2020,
    standard_deduction=Decimal("50000"),
    max_section_80c=Decimal("150000"),
    max_section_80d=Decimal("25000"),  # below 60; higher for senior citizens
)

FINANCIAL_YEARS: dict[str, FinancialYearRules] = {
    "2022-2023": DEFAULT_RULES,
    "2023-2024": FinancialYearRules(
        old_regime_slabs=_OLD_REGIME_SLABS,
        new_regime_slabs=_NEW_REGIME_SLABS_2023,
        standard_deduction=Decimal("50000"),
        max_section_80c=Decimal("150000"),
        max_section_80d=Decimal("25000"),
    ),
}

DEFAULT_FINANCIAL_YEAR = "2023-2024"


def validate_slab_table(slabs: tuple[Slab, ...]) -> None:
    """Check a slab table is ascending, ends unbounded, and uses rates in [0, 1).

    Raises:
        ValueError: if the table is malformed.
    """
    if not slabs:
        raise ValueError("Slab table must not be empty.")

    previous = Decimal("0")
    for index, slab in enumerate(slabs):
        if not Decimal("0") <= slab.rate < Decimal("1"):
            raise ValueError(f"Slab {index} rate {slab.rate} is outside [0, 1).")
        is_last = index == len(slabs) - 1
        if slab.upper_bound is None:
            if not is_last:
                raise ValueError(f"Only the final slab may be unbounded (slab {index}).")
            continue
        if is_last:
            raise ValueError("Final slab must be unbounded.")
        if slab.upper_bound <= previous:
            raise ValueError(f"Slab {index} upper bound {slab.upper_bound} is not ascending.")
        previous = slab.upper_bound


def get_year_rules(financial_year: str) -> FinancialYearRules:
    """Return the rules for a financial year, falling back to DEFAULT_RULES."""
    rules = FINANCIAL_YEARS.get(financial_year)
    if rules is None:
        logger.warning(
            "No tax rules for financial year %s; using default rules", financial_year
        )
        return DEFAULT_RULES
    return rules


for _rules in FINANCIAL_YEARS.values():
    validate_slab_table(_rules.old_regime_slabs)
    validate_slab_table(_rules.new_regime_slabs)

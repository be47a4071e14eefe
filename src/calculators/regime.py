"""Old vs new regime tax calculator for Indian individual taxpayers.

Pure arithmetic over the slab tables in tax_data: no I/O, no shared state.
Inputs are assumed validated by the caller; NaN or infinite amounts give
undefined results.
"""

import logging
from decimal import Decimal
from typing import Any

from src.calculators.scenarios import apply_changes
from src.calculators.tax_data import CESS_RATE, Slab, get_year_rules
from src.models import (
    NEW_REGIME,
    OLD_REGIME,
    DeductionProfile,
    IncomeProfile,
    Regime,
    Scenario,
    ScenarioChange,
    ScenarioOutcome,
    SimulationReport,
    TaxLiabilityResult,
    TaxProfile,
)

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")


def compute_slab_tax(taxable_income: Decimal, slabs: tuple[Slab, ...]) -> Decimal:
    """Walk the slab table and return tax before cess."""
    remaining = taxable_income
    previous_bound = _ZERO
    tax = _ZERO

    for slab in slabs:
        in_slab = max(_ZERO, remaining)
        if slab.upper_bound is not None:
            in_slab = min(in_slab, slab.upper_bound - previous_bound)
            previous_bound = slab.upper_bound

        tax += in_slab * slab.rate
        remaining -= in_slab

        if remaining <= 0:
            break

    return tax


def compute_tax_from_slabs(taxable_income: Decimal, slabs: tuple[Slab, ...]) -> Decimal:
    """Slab tax plus the 4% Health and Education Cess."""
    tax = compute_slab_tax(taxable_income, slabs)
    return tax + tax * CESS_RATE


def slab_breakdown(taxable_income: Decimal, slabs: tuple[Slab, ...]) -> list[dict[str, Any]]:
    """Per-slab rows of the amount taxed and the tax on it, before cess."""
    rows: list[dict[str, Any]] = []
    lower = _ZERO

    for slab in slabs:
        if taxable_income <= lower:
            break

        upper = slab.upper_bound if slab.upper_bound is not None else taxable_income
        amount = min(taxable_income, upper) - lower

        rows.append({
            "lower": float(lower),
            "upper": float(slab.upper_bound) if slab.upper_bound is not None else None,
            "rate": float(slab.rate),
            "taxable_amount": float(amount),
            "tax": float(amount * slab.rate),
        })
        lower = upper

    return rows


class TaxRegimeCalculator:
    """Computes taxable income and tax under both regimes for one financial year."""

    def __init__(self, financial_year: str) -> None:
        self.financial_year = financial_year
        rules = get_year_rules(financial_year)
        self.old_regime_slabs = rules.old_regime_slabs
        self.new_regime_slabs = rules.new_regime_slabs
        self.standard_deduction = rules.standard_deduction
        self.max_section_80c = rules.max_section_80c
        self.max_section_80d = rules.max_section_80d

    def slabs_for(self, regime: Regime) -> tuple[Slab, ...]:
        return self.new_regime_slabs if regime == NEW_REGIME else self.old_regime_slabs

    def compute_taxable_income(
        self,
        income: IncomeProfile,
        deductions: DeductionProfile,
        regime: Regime,
    ) -> Decimal:
        """Gross income less the deductions the regime allows, floored at zero.

        The new regime allows only the standard deduction. The old regime
        allows the standard deduction (salaried only), 80C and 80D up to
        their caps, and 80G plus any other deductions in full.
        """
        gross = income.gross_total

        if regime == NEW_REGIME:
            return max(_ZERO, gross - self.standard_deduction)

        taxable = gross
        if income.salary > 0:
            taxable -= self.standard_deduction
        taxable -= min(deductions.section_80c, self.max_section_80c)
        taxable -= min(deductions.section_80d, self.max_section_80d)
        taxable -= deductions.section_80g
        taxable -= sum(deductions.others.values(), _ZERO)

        return max(_ZERO, taxable)

    def compute_tax_from_slabs(self, taxable_income: Decimal, slabs: tuple[Slab, ...]) -> Decimal:
        return compute_tax_from_slabs(taxable_income, slabs)

    def calculate_tax_liability(
        self,
        income: IncomeProfile,
        deductions: DeductionProfile,
    ) -> TaxLiabilityResult:
        """Compare both regimes; a tie recommends the old regime."""
        taxable_old = self.compute_taxable_income(income, deductions, OLD_REGIME)
        taxable_new = self.compute_taxable_income(income, deductions, NEW_REGIME)

        old_tax = self.compute_tax_from_slabs(taxable_old, self.old_regime_slabs)
        new_tax = self.compute_tax_from_slabs(taxable_new, self.new_regime_slabs)

        recommended = OLD_REGIME if old_tax <= new_tax else NEW_REGIME
        logger.debug(
            "FY %s: old taxable=%s tax=%s, new taxable=%s tax=%s, recommended=%s",
            self.financial_year, taxable_old, old_tax, taxable_new, new_tax, recommended,
        )

        return TaxLiabilityResult(
            old_regime_tax=old_tax,
            new_regime_tax=new_tax,
            recommended_regime=recommended,
            taxable_income_old=taxable_old,
            taxable_income_new=taxable_new,
        )

    def estimate_tax_savings(
        self,
        taxable_income: Decimal,
        additional_deduction: Decimal,
        regime: Regime = OLD_REGIME,
    ) -> Decimal:
        """Cess-inclusive tax saved by deducting `additional_deduction` more."""
        slabs = self.slabs_for(regime)
        current = compute_tax_from_slabs(taxable_income, slabs)
        reduced = compute_tax_from_slabs(max(_ZERO, taxable_income - additional_deduction), slabs)
        return max(_ZERO, current - reduced)

    def simulate_scenario(
        self,
        profile: TaxProfile,
        changes: list[ScenarioChange],
        base: TaxLiabilityResult | None = None,
        name: str = "scenario",
    ) -> ScenarioOutcome:
        """Rerun the comparison on a copy of `profile` with `changes` applied.

        Savings are measured against `base`, which is computed from the
        unmodified profile when not supplied. `profile` is never mutated.
        """
        if base is None:
            base = self.calculate_tax_liability(profile.income, profile.deductions)

        simulated = apply_changes(profile, changes)
        result = self.calculate_tax_liability(simulated.income, simulated.deductions)

        return ScenarioOutcome(
            name=name,
            changes=changes,
            result=result,
            savings=base.payable_tax - result.payable_tax,
        )

    def simulate_scenarios(self, profile: TaxProfile, scenarios: list[Scenario]) -> SimulationReport:
        """Simulate each named scenario independently against one base result."""
        base = self.calculate_tax_liability(profile.income, profile.deductions)
        outcomes = [
            self.simulate_scenario(profile, scenario.changes, base=base, name=scenario.name)
            for scenario in scenarios
        ]
        logger.info(
            "FY %s: simulated %d scenario(s) against base tax %s",
            self.financial_year, len(outcomes), base.payable_tax,
        )
        return SimulationReport(base=base, scenarios=outcomes)

"""Plain-language regime and deduction recommendations."""

from decimal import ROUND_HALF_UP, Decimal

from src.calculators.regime import TaxRegimeCalculator
from src.models import OLD_REGIME, Recommendation, TaxLiabilityResult, TaxProfile

_ZERO = Decimal("0")


def format_inr(amount: Decimal) -> str:
    """Format a rupee amount with Indian digit grouping, e.g. ₹1,50,000."""
    rounded = int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    sign = "-" if rounded < 0 else ""
    digits = str(abs(rounded))

    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups: list[str] = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ",".join([*groups, tail])

    return f"{sign}₹{digits}"


def _old_regime_advice(
    calculator: TaxRegimeCalculator,
    profile: TaxProfile,
    liability: TaxLiabilityResult,
) -> list[Recommendation]:
    difference = liability.savings
    if difference > 0:
        description = (
            "Based on your income and deductions, the old tax regime is more "
            f"beneficial, saving you approximately {format_inr(difference)} in taxes."
        )
    else:
        description = (
            "Both regimes result in the same tax on your income and deductions, "
            "so the old regime keeps your deductions working for you."
        )

    advice = [Recommendation(
        category="REGIME",
        title="Old Tax Regime is Beneficial",
        description=description,
        action="Continue with the old tax regime and maximize your eligible deductions.",
        potential_savings=difference,
        priority="HIGH",
    )]

    claimed_80c = profile.deductions.section_80c
    if claimed_80c < calculator.max_section_80c:
        unused = calculator.max_section_80c - claimed_80c
        advice.append(Recommendation(
            category="SECTION_80C",
            title="Maximize Section 80C Deductions",
            description=(
                f"You have utilized {format_inr(claimed_80c)} out of "
                f"{format_inr(calculator.max_section_80c)} under Section 80C. You can "
                f"invest an additional {format_inr(unused)} to further reduce your tax liability."
            ),
            action="Consider investing in PPF, ELSS mutual funds, or paying life insurance premiums.",
            potential_savings=calculator.estimate_tax_savings(liability.taxable_income_old, unused),
            priority="HIGH",
        ))

    claimed_80d = profile.deductions.section_80d
    if claimed_80d < calculator.max_section_80d:
        unused = calculator.max_section_80d - claimed_80d
        advice.append(Recommendation(
            category="SECTION_80D",
            title="Health Insurance Premium Deduction",
            description=(
                f"You can claim an additional {format_inr(unused)} under Section 80D "
                "for health insurance premiums."
            ),
            action="Consider purchasing health insurance for yourself or your family members.",
            potential_savings=calculator.estimate_tax_savings(liability.taxable_income_old, unused),
            priority="MEDIUM",
        ))

    return advice


def _new_regime_advice(
    liability: TaxLiabilityResult,
    small_difference_threshold: Decimal,
) -> list[Recommendation]:
    difference = liability.savings
    advice = [
        Recommendation(
            category="REGIME",
            title="New Tax Regime is Beneficial",
            description=(
                "Based on your income and deductions, the new tax regime is more "
                f"beneficial, saving you approximately {format_inr(difference)} in taxes."
            ),
            action="Consider switching to the new tax regime for this financial year.",
            potential_savings=difference,
            priority="HIGH",
        ),
        Recommendation(
            category="COMPLIANCE",
            title="Simplified Tax Compliance",
            description=(
                "The new tax regime offers simplified tax compliance with fewer "
                "deductions and exemptions to track."
            ),
            action="When filing your tax return, select the new tax regime option.",
            priority="LOW",
        ),
    ]

    if difference < small_difference_threshold:
        advice.append(Recommendation(
            category="REGIME",
            title="Consider Long-Term Benefits",
            description=(
                f"The tax savings of {format_inr(difference)} is relatively small. "
                "Consider if the investment benefits of the old regime might be "
                "more valuable in the long run."
            ),
            action="Evaluate your long-term financial goals before deciding.",
            priority="MEDIUM",
        ))

    return advice


def generate_recommendations(
    calculator: TaxRegimeCalculator,
    profile: TaxProfile,
    liability: TaxLiabilityResult,
    small_difference_threshold: Decimal = _ZERO,
) -> list[Recommendation]:
    """Advice for the recommended regime, regime choice first.

    Args:
        calculator: Calculator for the same financial year as `liability`.
        profile: The income and deductions `liability` was computed from.
        liability: Result of `calculator.calculate_tax_liability`.
        small_difference_threshold: Regime differences below this amount
            are flagged as marginal when the new regime wins.
    """
    if liability.recommended_regime == OLD_REGIME:
        return _old_regime_advice(calculator, profile, liability)
    return _new_regime_advice(liability, small_difference_threshold)

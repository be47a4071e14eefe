"""Tests for the old vs new regime tax calculator."""

import logging
from decimal import Decimal

import pytest

from src.calculators.regime import (
    TaxRegimeCalculator,
    compute_slab_tax,
    compute_tax_from_slabs,
    slab_breakdown,
)
from src.calculators.tax_data import (
    DEFAULT_RULES,
    FINANCIAL_YEARS,
    Slab,
    get_year_rules,
    validate_slab_table,
)
from src.models import DeductionProfile, IncomeProfile, TaxProfile
from tests.conftest import make_profile

OLD_2023 = FINANCIAL_YEARS["2023-2024"].old_regime_slabs
NEW_2023 = FINANCIAL_YEARS["2023-2024"].new_regime_slabs
NEW_DEFAULT = DEFAULT_RULES.new_regime_slabs


# --- Slab walk tests ---


class TestSlabTax:
    def test_zero_income(self) -> None:
        assert compute_tax_from_slabs(Decimal("0"), OLD_2023) == 0
        assert compute_tax_from_slabs(Decimal("0"), NEW_2023) == 0

    def test_at_zero_rate_threshold(self) -> None:
        """No tax, and so no cess, up to the first slab's upper bound."""
        assert compute_tax_from_slabs(Decimal("250000"), OLD_2023) == 0
        assert compute_tax_from_slabs(Decimal("300000"), NEW_2023) == 0

    def test_old_regime_reference_475k(self) -> None:
        """(475,000 - 250,000) * 5% = 11,250; with 4% cess = 11,700."""
        assert compute_slab_tax(Decimal("475000"), OLD_2023) == Decimal("11250")
        assert compute_tax_from_slabs(Decimal("475000"), OLD_2023) == Decimal("11700")

    def test_new_regime_reference_650k(self) -> None:
        """300,000 * 5% + 50,000 * 10% = 20,000; with cess = 20,800."""
        assert compute_slab_tax(Decimal("650000"), NEW_2023) == Decimal("20000")
        assert compute_tax_from_slabs(Decimal("650000"), NEW_2023) == Decimal("20800")

    def test_old_regime_top_slab(self) -> None:
        """15L: 12,500 + 1,00,000 + 1,50,000 = 2,62,500; with cess = 2,73,000."""
        assert compute_tax_from_slabs(Decimal("1500000"), OLD_2023) == Decimal("273000")

    def test_new_regime_all_slabs(self) -> None:
        """16L: 15,000 + 30,000 + 45,000 + 60,000 + 30,000 = 1,80,000."""
        assert compute_slab_tax(Decimal("1600000"), NEW_2023) == Decimal("180000")
        assert compute_tax_from_slabs(Decimal("1600000"), NEW_2023) == Decimal("187200")

    def test_default_new_regime_slabs(self) -> None:
        """8L on pre-2023 new slabs: 12,500 + 25,000 + 7,500 = 45,000."""
        assert compute_slab_tax(Decimal("800000"), NEW_DEFAULT) == Decimal("45000")

    @pytest.mark.parametrize("income", ["0", "250000", "475000", "999999", "1000000", "2750000"])
    def test_cess_is_four_percent_of_slab_tax(self, income: str) -> None:
        taxable = Decimal(income)
        slab_tax = compute_slab_tax(taxable, OLD_2023)
        assert compute_tax_from_slabs(taxable, OLD_2023) == slab_tax * Decimal("1.04")

    @pytest.mark.parametrize("slabs", [OLD_2023, NEW_2023, NEW_DEFAULT])
    def test_monotonic_in_income(self, slabs: tuple[Slab, ...]) -> None:
        incomes = [Decimal(n) for n in range(0, 3_000_001, 50_000)]
        taxes = [compute_tax_from_slabs(i, slabs) for i in incomes]
        assert taxes == sorted(taxes)


class TestSlabBreakdown:
    def test_rows_match_slab_tax(self) -> None:
        rows = slab_breakdown(Decimal("475000"), OLD_2023)
        assert len(rows) == 2
        assert rows[1]["taxable_amount"] == 225000.0
        assert rows[1]["tax"] == 11250.0
        expected = float(compute_slab_tax(Decimal("475000"), OLD_2023))
        assert sum(r["tax"] for r in rows) == pytest.approx(expected)

    def test_top_slab_is_open_ended(self) -> None:
        rows = slab_breakdown(Decimal("1200000"), OLD_2023)
        assert rows[-1]["upper"] is None
        assert rows[-1]["taxable_amount"] == 200000.0

    def test_zero_income(self) -> None:
        assert slab_breakdown(Decimal("0"), OLD_2023) == []


# --- Taxable income tests ---


class TestTaxableIncome:
    def test_old_regime_reference(self, calculator: TaxRegimeCalculator, salaried_profile: TaxProfile) -> None:
        """700,000 - 50,000 std - 150,000 (80C) - 25,000 (80D) = 475,000."""
        taxable = calculator.compute_taxable_income(
            salaried_profile.income, salaried_profile.deductions, "OLD"
        )
        assert taxable == Decimal("475000")

    def test_new_regime_ignores_deductions(
        self, calculator: TaxRegimeCalculator, salaried_profile: TaxProfile
    ) -> None:
        taxable = calculator.compute_taxable_income(
            salaried_profile.income, salaried_profile.deductions, "NEW"
        )
        assert taxable == Decimal("650000")

    def test_80c_capped(self, calculator: TaxRegimeCalculator) -> None:
        profile = make_profile({"80C": 999999999}, salary=2000000)
        taxable = calculator.compute_taxable_income(profile.income, profile.deductions, "OLD")
        assert taxable == Decimal("2000000") - Decimal("50000") - Decimal("150000")

    def test_80d_capped(self, calculator: TaxRegimeCalculator) -> None:
        profile = make_profile({"80D": 100000}, salary=1000000)
        taxable = calculator.compute_taxable_income(profile.income, profile.deductions, "OLD")
        assert taxable == Decimal("925000")

    def test_80g_and_others_uncapped(self, calculator: TaxRegimeCalculator) -> None:
        profile = make_profile(
            {"80G": 100000, "others": {"housingLoan": 200000, "nps": 50000}},
            salary=1000000,
        )
        taxable = calculator.compute_taxable_income(profile.income, profile.deductions, "OLD")
        assert taxable == Decimal("600000")

    def test_standard_deduction_only_for_salary_in_old_regime(
        self, calculator: TaxRegimeCalculator
    ) -> None:
        profile = make_profile(business=600000)
        old = calculator.compute_taxable_income(profile.income, profile.deductions, "OLD")
        new = calculator.compute_taxable_income(profile.income, profile.deductions, "NEW")
        assert old == Decimal("600000")
        assert new == Decimal("550000")

    def test_all_income_heads_summed(self, calculator: TaxRegimeCalculator) -> None:
        profile = make_profile(
            salary=100000, interest=20000, rental=30000,
            business=40000, capital_gains=50000, other=60000,
        )
        assert profile.income.gross_total == Decimal("300000")
        new = calculator.compute_taxable_income(profile.income, profile.deductions, "NEW")
        assert new == Decimal("250000")

    def test_deductions_exceeding_income_clamp_to_zero(self, calculator: TaxRegimeCalculator) -> None:
        profile = make_profile({"80G": 5000000, "others": {"x": 1000000}}, salary=300000)
        assert calculator.compute_taxable_income(profile.income, profile.deductions, "OLD") == 0
        small = make_profile(salary=30000)
        assert calculator.compute_taxable_income(small.income, small.deductions, "NEW") == 0

    def test_negative_inputs_do_not_raise(self, calculator: TaxRegimeCalculator) -> None:
        income = IncomeProfile(salary=Decimal("-100000"), other=Decimal("-5"))
        deductions = DeductionProfile(section_80g=Decimal("-20000"))
        assert calculator.compute_taxable_income(income, deductions, "OLD") == 0
        assert calculator.compute_taxable_income(income, deductions, "NEW") == 0


# --- Regime comparison tests ---


class TestTaxLiability:
    def test_reference_profile(self, calculator: TaxRegimeCalculator, salaried_profile: TaxProfile) -> None:
        result = calculator.calculate_tax_liability(salaried_profile.income, salaried_profile.deductions)
        assert result.taxable_income_old == Decimal("475000")
        assert result.taxable_income_new == Decimal("650000")
        assert result.old_regime_tax == Decimal("11700")
        assert result.new_regime_tax == Decimal("20800")
        assert result.recommended_regime == "OLD"
        assert result.payable_tax == Decimal("11700")
        assert result.savings == Decimal("9100")

    def test_legacy_shape(self, calculator: TaxRegimeCalculator, salaried_profile: TaxProfile) -> None:
        result = calculator.calculate_tax_liability(salaried_profile.income, salaried_profile.deductions)
        assert result.to_legacy_dict() == {
            "oldRegime": 11700.0,
            "newRegime": 20800.0,
            "recommended": "OLD",
        }

    def test_new_regime_wins_without_deductions(self, calculator: TaxRegimeCalculator) -> None:
        """15L salary: old 2,57,400 vs new 1,45,600."""
        profile = make_profile(salary=1500000)
        result = calculator.calculate_tax_liability(profile.income, profile.deductions)
        assert result.old_regime_tax == Decimal("257400")
        assert result.new_regime_tax == Decimal("145600")
        assert result.recommended_regime == "NEW"
        assert result.payable_tax == Decimal("145600")
        assert result.savings == Decimal("111800")

    def test_tie_recommends_old(self, calculator: TaxRegimeCalculator) -> None:
        profile = make_profile(salary=300000)
        result = calculator.calculate_tax_liability(profile.income, profile.deductions)
        assert result.old_regime_tax == result.new_regime_tax == 0
        assert result.recommended_regime == "OLD"

    def test_inputs_not_mutated(self, calculator: TaxRegimeCalculator, salaried_profile: TaxProfile) -> None:
        before = salaried_profile.model_dump()
        calculator.calculate_tax_liability(salaried_profile.income, salaried_profile.deductions)
        assert salaried_profile.model_dump() == before

    def test_year_changes_new_regime(self, salaried_profile: TaxProfile) -> None:
        """Same profile on 2022-2023 new slabs: 12,500 + 15,000 = 27,500 + cess."""
        result = TaxRegimeCalculator("2022-2023").calculate_tax_liability(
            salaried_profile.income, salaried_profile.deductions
        )
        assert result.old_regime_tax == Decimal("11700")
        assert result.new_regime_tax == Decimal("28600")

    def test_method_matches_module_function(self, calculator: TaxRegimeCalculator) -> None:
        for regime, expected in (("OLD", Decimal("11700")), ("NEW", Decimal("9100"))):
            slabs = calculator.slabs_for(regime)
            assert calculator.compute_tax_from_slabs(Decimal("475000"), slabs) == expected

    def test_itemised_total_is_uncapped(self) -> None:
        """Claimed deductions sum before caps; only taxable income applies them."""
        profile = make_profile(
            {"80C": 200000, "80D": 25000, "80G": 10000, "others": {"nps": 50000, "hra": 5000}},
            salary=1000000,
        )
        assert profile.deductions.itemised_total == Decimal("290000")


class TestEstimateSavings:
    def test_additional_80c(self, calculator: TaxRegimeCalculator) -> None:
        """Tax on 4,75,000 (11,700) less tax on 3,75,000 (6,500)."""
        saved = calculator.estimate_tax_savings(Decimal("475000"), Decimal("100000"))
        assert saved == Decimal("5200")

    def test_deduction_larger_than_income(self, calculator: TaxRegimeCalculator) -> None:
        saved = calculator.estimate_tax_savings(Decimal("475000"), Decimal("9000000"))
        assert saved == Decimal("11700")

    def test_new_regime_slabs(self, calculator: TaxRegimeCalculator) -> None:
        saved = calculator.estimate_tax_savings(Decimal("650000"), Decimal("50000"), regime="NEW")
        assert saved == Decimal("5200")


# --- Year configuration tests ---


class TestTaxData:
    def test_known_year(self) -> None:
        assert get_year_rules("2023-2024") is FINANCIAL_YEARS["2023-2024"]

    def test_unknown_year_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            calculator = TaxRegimeCalculator("1999-2000")
        assert calculator.new_regime_slabs == DEFAULT_RULES.new_regime_slabs
        assert calculator.max_section_80c == Decimal("150000")
        assert "1999-2000" in caplog.text

    @pytest.mark.parametrize("year", sorted(FINANCIAL_YEARS))
    def test_tables_are_progressive(self, year: str) -> None:
        rules = FINANCIAL_YEARS[year]
        for slabs in (rules.old_regime_slabs, rules.new_regime_slabs):
            assert slabs[-1].upper_bound is None
            rates = [s.rate for s in slabs]
            assert rates == sorted(rates)

    def test_rejects_empty_table(self) -> None:
        with pytest.raises(ValueError):
            validate_slab_table(())

    def test_rejects_bounded_final_slab(self) -> None:
        with pytest.raises(ValueError, match="unbounded"):
            validate_slab_table((Slab(Decimal("100"), Decimal("0")),))

    def test_rejects_unbounded_middle_slab(self) -> None:
        with pytest.raises(ValueError, match="final slab"):
            validate_slab_table((Slab(None, Decimal("0")), Slab(None, Decimal("0.1"))))

    def test_rejects_descending_bounds(self) -> None:
        with pytest.raises(ValueError, match="ascending"):
            validate_slab_table((
                Slab(Decimal("500"), Decimal("0")),
                Slab(Decimal("100"), Decimal("0.1")),
                Slab(None, Decimal("0.2")),
            ))

    def test_rejects_rate_of_one(self) -> None:
        with pytest.raises(ValueError, match="rate"):
            validate_slab_table((Slab(None, Decimal("1")),))

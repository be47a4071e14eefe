"""Shared test fixtures."""

from decimal import Decimal
from pathlib import Path

import pytest

from src.analysis import TaxAnalysisService
from src.calculators.deductions import AdviceConfig, load_advice_config
from src.calculators.regime import TaxRegimeCalculator
from src.models import DeductionProfile, IncomeProfile, TaxProfile

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def make_profile(
    deductions: dict[str, object] | None = None,
    **income: int,
) -> TaxProfile:
    """Build a TaxProfile from income keyword amounts and a deductions dict."""
    return TaxProfile(
        income=IncomeProfile(**{k: Decimal(v) for k, v in income.items()}),
        deductions=DeductionProfile.model_validate(deductions or {}),
    )


@pytest.fixture
def calculator() -> TaxRegimeCalculator:
    """Calculator for FY 2023-2024."""
    return TaxRegimeCalculator("2023-2024")


@pytest.fixture
def salaried_profile() -> TaxProfile:
    """₹7L salary with 80C and 80D fully used (old regime: ₹11,700)."""
    return make_profile({"80C": 150000, "80D": 25000, "80G": 0, "others": {}}, salary=700000)


@pytest.fixture
def advice_config() -> AdviceConfig:
    return load_advice_config("deduction_limits.yaml")


@pytest.fixture
def service(advice_config: AdviceConfig) -> TaxAnalysisService:
    return TaxAnalysisService(advice_config, default_financial_year="2023-2024")

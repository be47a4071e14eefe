"""Tax analysis service: regime comparison, headroom, advice and scenarios."""

import logging

from src.calculators.deductions import AdviceConfig, potential_deductions
from src.calculators.recommendations import generate_recommendations
from src.calculators.regime import TaxRegimeCalculator
from src.models import Scenario, SimulationReport, TaxAnalysis, TaxLiabilityResult, TaxProfile

logger = logging.getLogger(__name__)


class TaxAnalysisService:
    """Runs calculations for HTTP handlers and scripts.

    Holds only read-only configuration, so one instance can serve
    concurrent requests. A fresh calculator is built per call.
    """

    def __init__(self, advice: AdviceConfig, default_financial_year: str) -> None:
        self._advice = advice
        self._default_financial_year = default_financial_year

    @property
    def advice(self) -> AdviceConfig:
        return self._advice

    @property
    def default_financial_year(self) -> str:
        return self._default_financial_year

    def _calculator(self, financial_year: str | None) -> TaxRegimeCalculator:
        return TaxRegimeCalculator(financial_year or self._default_financial_year)

    def calculate(self, profile: TaxProfile, financial_year: str | None = None) -> TaxLiabilityResult:
        """Compare old and new regime tax for a profile."""
        calculator = self._calculator(financial_year)
        result = calculator.calculate_tax_liability(profile.income, profile.deductions)
        logger.info(
            "FY %s: old=%s new=%s recommended=%s",
            calculator.financial_year,
            result.old_regime_tax,
            result.new_regime_tax,
            result.recommended_regime,
        )
        return result

    def analyze(self, profile: TaxProfile, financial_year: str | None = None) -> TaxAnalysis:
        """Regime comparison plus deduction headroom and recommendations.

        Args:
            profile: Income and deductions for the year.
            financial_year: e.g. "2023-2024"; the configured default if omitted.

        Returns:
            TaxAnalysis with liability, per-category headroom and advice.
        """
        calculator = self._calculator(financial_year)
        liability = calculator.calculate_tax_liability(profile.income, profile.deductions)
        headroom = potential_deductions(profile.deductions, self._advice.limits)
        recommendations = generate_recommendations(
            calculator,
            profile,
            liability,
            small_difference_threshold=self._advice.small_difference_threshold,
        )
        logger.info(
            "FY %s: analysis recommends %s with %d recommendation(s)",
            calculator.financial_year,
            liability.recommended_regime,
            len(recommendations),
        )
        return TaxAnalysis(
            financial_year=calculator.financial_year,
            liability=liability,
            headroom=headroom,
            recommendations=recommendations,
        )

    def simulate(
        self,
        profile: TaxProfile,
        scenarios: list[Scenario],
        financial_year: str | None = None,
    ) -> SimulationReport:
        """Run what-if scenarios against the profile's base result."""
        return self._calculator(financial_year).simulate_scenarios(profile, scenarios)

"""Compare old and new regime tax for a profile stored in a YAML file.

Usage:
    # Regime comparison with recommendations
    python scripts/compare_regimes.py profile.yaml

    # A specific financial year
    python scripts/compare_regimes.py profile.yaml --financial-year 2022-2023

    # Machine-readable output
    python scripts/compare_regimes.py profile.yaml --json

The YAML file holds `income`, `deductions` and optionally `financial_year`
and `scenarios` (a list of `{name, changes: [{field, newValue}]}`).
"""

import argparse
import json
import logging
import sys
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config.settings import settings
from src.analysis import TaxAnalysisService
from src.calculators.deductions import load_advice_config
from src.calculators.recommendations import format_inr
from src.calculators.regime import TaxRegimeCalculator, slab_breakdown
from src.models import Scenario, SimulationReport, TaxAnalysis, TaxProfile

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compare old vs new regime income tax")
    parser.add_argument("profile", type=Path, help="YAML file with income and deductions")
    parser.add_argument(
        "--financial-year",
        help="Financial year, e.g. 2023-2024 (default: from the file, then settings)",
    )
    parser.add_argument("--json", action="store_true", help="Print the analysis as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return parser.parse_args(argv)


def load_profile(path: Path) -> tuple[TaxProfile, list[Scenario], str | None]:
    """Read a profile, its scenarios and its financial year from YAML.

    Raises:
        OSError: if the file cannot be read.
        ValueError: if the content is not a valid profile.
    """
    data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a mapping")

    profile = TaxProfile.model_validate({
        "income": data.get("income") or {},
        "deductions": data.get("deductions") or {},
    })
    scenarios = [Scenario.model_validate(s) for s in data.get("scenarios") or []]

    financial_year = data.get("financial_year")
    if financial_year is not None and not isinstance(financial_year, str):
        raise ValueError(f"financial_year must be a string like '2023-2024', not {financial_year!r}")
    return profile, scenarios, financial_year


def print_report(
    profile: TaxProfile,
    analysis: TaxAnalysis,
    simulation: SimulationReport | None,
) -> None:
    """Log the formatted comparison."""
    liability = analysis.liability
    calculator = TaxRegimeCalculator(analysis.financial_year)

    logger.info("=" * 60)
    logger.info("OLD vs NEW REGIME: FY %s", analysis.financial_year)
    logger.info("=" * 60)
    logger.info("Gross income:       %s", format_inr(profile.income.gross_total))
    logger.info("Deductions claimed: %s", format_inr(profile.deductions.itemised_total))

    for regime, taxable, tax, slabs in (
        ("OLD", liability.taxable_income_old, liability.old_regime_tax, calculator.old_regime_slabs),
        ("NEW", liability.taxable_income_new, liability.new_regime_tax, calculator.new_regime_slabs),
    ):
        logger.info("")
        logger.info("%s REGIME", regime)
        logger.info("-" * 40)
        logger.info("  Taxable income:  %s", format_inr(taxable))
        for row in slab_breakdown(taxable, slabs):
            logger.info(
                "  %5.1f%% on %12s -> %s",
                row["rate"] * 100,
                format_inr(Decimal(str(row["taxable_amount"]))),
                format_inr(Decimal(str(row["tax"]))),
            )
        logger.info("  Tax incl. cess:  %s", format_inr(tax))

    logger.info("")
    logger.info(
        "RECOMMENDED: %s regime (saves %s)",
        liability.recommended_regime,
        format_inr(liability.savings),
    )

    if analysis.recommendations:
        logger.info("")
        logger.info("RECOMMENDATIONS")
        logger.info("-" * 40)
        for rec in analysis.recommendations:
            logger.info("  [%s] %s", rec.priority, rec.title)
            logger.info("     %s", rec.description)

    if simulation is not None:
        logger.info("")
        logger.info("SCENARIOS")
        logger.info("-" * 40)
        for outcome in simulation.scenarios:
            logger.info(
                "  %-30s %s regime, tax %s, savings %s",
                outcome.name[:30],
                outcome.result.recommended_regime,
                format_inr(outcome.result.payable_tax),
                format_inr(outcome.savings),
            )

    logger.info("")
    logger.info("=" * 60)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        profile, scenarios, file_year = load_profile(args.profile)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        logger.error("Could not load profile %s: %s", args.profile, exc)
        return 1

    service = TaxAnalysisService(
        load_advice_config(settings.deduction_limits_file),
        default_financial_year=settings.default_financial_year,
    )
    financial_year = args.financial_year or file_year

    analysis = service.analyze(profile, financial_year)
    simulation = service.simulate(profile, scenarios, financial_year) if scenarios else None

    if args.json:
        output: dict[str, Any] = analysis.model_dump(mode="json")
        if simulation is not None:
            output["simulation"] = simulation.model_dump(mode="json", by_alias=True)
        print(json.dumps(output, indent=2, ensure_ascii=False))
    else:
        print_report(profile, analysis, simulation)
    return 0


if __name__ == "__main__":
    sys.exit(main())

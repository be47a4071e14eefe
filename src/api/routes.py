"""API routes for the tax regime calculator."""

import logging
from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Request
from pydantic import ConfigDict, Field, model_validator

from src.analysis import TaxAnalysisService
from src.calculators.tax_data import FINANCIAL_YEARS
from src.models import (
    DEDUCTION_SECTIONS,
    INCOME_FIELDS,
    Scenario,
    SimulationReport,
    TaxAnalysis,
    TaxProfile,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_amount(name: str, value: Decimal) -> None:
    if value < 0:
        raise ValueError(f"{name} must be non-negative")


class CalculateRequest(TaxProfile):
    """Request body for the calculation endpoints. Missing amounts default to 0."""

    model_config = ConfigDict(populate_by_name=True)

    financial_year: str | None = Field(default=None, alias="financialYear")

    @model_validator(mode="after")
    def _amounts_non_negative(self) -> "CalculateRequest":
        for name in INCOME_FIELDS:
            _check_amount(f"income.{name}", getattr(self.income, name))
        for name in DEDUCTION_SECTIONS:
            _check_amount(f"deductions.{name}", getattr(self.deductions, name))
        for key, value in self.deductions.others.items():
            _check_amount(f"deductions.others.{key}", value)
        return self


class SimulateRequest(CalculateRequest):
    """Request body for the /api/tax/simulate endpoint."""

    scenarios: list[Scenario] = Field(min_length=1)

    @model_validator(mode="after")
    def _scenario_values_non_negative(self) -> "SimulateRequest":
        for scenario in self.scenarios:
            for change in scenario.changes:
                _check_amount(change.field, change.new_value)
        return self


def _service(request: Request) -> TaxAnalysisService:
    return request.app.state.analysis_service


@router.get("/health")
async def health(request: Request) -> dict[str, Any]:
    """Health check with the financial years that have explicit rules."""
    return {
        "status": "ok",
        "financial_years": sorted(FINANCIAL_YEARS),
        "default_financial_year": _service(request).default_financial_year,
    }


@router.post("/api/tax/calculate")
async def calculate(body: CalculateRequest, request: Request) -> dict[str, Any]:
    """Compare old and new regime tax and recommend the lower one."""
    service = _service(request)
    financial_year = body.financial_year or service.default_financial_year
    result = service.calculate(body, financial_year)

    tax_liability: dict[str, Any] = result.to_legacy_dict()
    tax_liability["taxableIncomeOld"] = float(result.taxable_income_old)
    tax_liability["taxableIncomeNew"] = float(result.taxable_income_new)

    return {
        "success": True,
        "financialYear": financial_year,
        "taxLiability": tax_liability,
    }


@router.post("/api/tax/analyze", response_model=TaxAnalysis)
async def analyze(body: CalculateRequest, request: Request) -> TaxAnalysis:
    """Regime comparison with deduction headroom and recommendations."""
    return _service(request).analyze(body, body.financial_year)


@router.post("/api/tax/simulate", response_model=SimulationReport)
async def simulate(body: SimulateRequest, request: Request) -> SimulationReport:
    """Simulate what-if scenarios against the submitted profile."""
    logger.info("Simulating %d scenario(s)", len(body.scenarios))
    return _service(request).simulate(body, body.scenarios, body.financial_year)


@router.get("/api/tax/deduction-limits")
async def deduction_limits(request: Request) -> dict[str, Any]:
    """Configured deduction limits; a null limit means uncapped."""
    limits = _service(request).advice.limits
    return {
        "deductionLimits": {
            item.category: float(item.limit) if item.limit is not None else None
            for item in limits
        },
    }

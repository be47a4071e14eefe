"""Pydantic models for tax profiles, calculation results and scenarios."""

from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator

# Decimal internally, plain JSON number on the wire
Amount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

Regime = Literal["OLD", "NEW"]
Priority = Literal["LOW", "MEDIUM", "HIGH"]

OLD_REGIME: Regime = "OLD"
NEW_REGIME: Regime = "NEW"

INCOME_FIELDS: tuple[str, ...] = (
    "salary",
    "interest",
    "rental",
    "business",
    "capital_gains",
    "other",
)

DEDUCTION_SECTIONS: tuple[str, ...] = ("section_80c", "section_80d", "section_80g")

_ZERO = Decimal("0")


# --- Profiles ---


class IncomeProfile(BaseModel):
    """Income for one financial year, by head of income."""

    model_config = ConfigDict(populate_by_name=True)

    salary: Amount = _ZERO
    interest: Amount = _ZERO
    rental: Amount = _ZERO
    business: Amount = _ZERO
    capital_gains: Amount = Field(default=_ZERO, alias="capitalGains")
    other: Amount = _ZERO

    @property
    def gross_total(self) -> Decimal:
        return sum((getattr(self, name) for name in INCOME_FIELDS), _ZERO)


class DeductionProfile(BaseModel):
    """Chapter VI-A deductions claimed, plus uncategorised extras in `others`."""

    model_config = ConfigDict(populate_by_name=True)

    section_80c: Amount = Field(default=_ZERO, alias="80C")
    section_80d: Amount = Field(default=_ZERO, alias="80D")
    section_80g: Amount = Field(default=_ZERO, alias="80G")
    others: dict[str, Amount] = Field(default_factory=dict)

    @property
    def itemised_total(self) -> Decimal:
        """Sum of every claimed deduction before caps are applied."""
        named = sum((getattr(self, name) for name in DEDUCTION_SECTIONS), _ZERO)
        return named + sum(self.others.values(), _ZERO)


class TaxProfile(BaseModel):
    """Income and deductions for one taxpayer and year."""

    income: IncomeProfile = Field(default_factory=IncomeProfile)
    deductions: DeductionProfile = Field(default_factory=DeductionProfile)


# --- Results ---


class TaxLiabilityResult(BaseModel):
    """Cess-inclusive tax under both regimes and the cheaper one."""

    old_regime_tax: Amount
    new_regime_tax: Amount
    recommended_regime: Regime
    taxable_income_old: Amount
    taxable_income_new: Amount

    @property
    def payable_tax(self) -> Decimal:
        if self.recommended_regime == OLD_REGIME:
            return self.old_regime_tax
        return self.new_regime_tax

    @property
    def savings(self) -> Decimal:
        """Tax saved by choosing the recommended regime over the other one."""
        return abs(self.old_regime_tax - self.new_regime_tax)

    def to_legacy_dict(self) -> dict[str, float | str]:
        """Render as the `{oldRegime, newRegime, recommended}` shape callers expect."""
        return {
            "oldRegime": float(self.old_regime_tax),
            "newRegime": float(self.new_regime_tax),
            "recommended": self.recommended_regime,
        }


# --- Scenarios ---

_FIELD_ALIASES: dict[str, str] = {
    "salary": "income.salary",
    "interest": "income.interest",
    "interestIncome": "income.interest",
    "rental": "income.rental",
    "rentalIncome": "income.rental",
    "business": "income.business",
    "businessIncome": "income.business",
    "capital": "income.capital_gains",
    "capital_gains": "income.capital_gains",
    "capitalGains": "income.capital_gains",
    "other": "income.other",
    "otherIncome": "income.other",
    "80C": "deductions.section_80c",
    "section80C": "deductions.section_80c",
    "section_80c": "deductions.section_80c",
    "80D": "deductions.section_80d",
    "section80D": "deductions.section_80d",
    "section_80d": "deductions.section_80d",
    "80G": "deductions.section_80g",
    "section80G": "deductions.section_80g",
    "section_80g": "deductions.section_80g",
}


def resolve_profile_field(name: str) -> str:
    """Map a field name in any accepted spelling to its canonical dotted path.

    Canonical paths are ``income.<field>``, ``deductions.<section>`` and
    ``deductions.others.<key>``.

    Raises:
        ValueError: if the name does not identify an income or deduction field.
    """
    key = name.strip()
    for prefix in ("income.", "deductions."):
        if key.startswith(prefix):
            key = key[len(prefix):]
            break

    if key.startswith("others."):
        other_key = key[len("others."):]
        if not other_key:
            raise ValueError(f"Missing deduction key in field: {name!r}")
        return f"deductions.others.{other_key}"

    try:
        return _FIELD_ALIASES[key]
    except KeyError:
        raise ValueError(f"Unknown profile field: {name!r}") from None


class ScenarioChange(BaseModel):
    """Override one income or deduction field with a new value."""

    model_config = ConfigDict(populate_by_name=True)

    field: str
    new_value: Amount = Field(alias="newValue")

    @field_validator("field")
    @classmethod
    def _canonical_field(cls, value: str) -> str:
        return resolve_profile_field(value)


class Scenario(BaseModel):
    """A named what-if: a set of changes applied together."""

    name: str
    changes: list[ScenarioChange] = []


class ScenarioOutcome(BaseModel):
    """Result of one simulated scenario against the base profile."""

    name: str
    changes: list[ScenarioChange]
    result: TaxLiabilityResult
    savings: Amount  # base payable tax minus scenario payable tax


class SimulationReport(BaseModel):
    base: TaxLiabilityResult
    scenarios: list[ScenarioOutcome]


# --- Advice ---


class DeductionHeadroom(BaseModel):
    """How much of a capped deduction is still unused."""

    category: str
    current: Amount
    limit: Amount | None = None  # None = no statutory limit
    remaining: Amount | None = None


class Recommendation(BaseModel):
    category: str
    title: str
    description: str
    action: str
    potential_savings: Amount = _ZERO
    priority: Priority = "MEDIUM"


class TaxAnalysis(BaseModel):
    """Regime comparison with deduction headroom and recommendations."""

    financial_year: str
    liability: TaxLiabilityResult
    headroom: list[DeductionHeadroom]
    recommendations: list[Recommendation]

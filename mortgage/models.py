"""Immutable value objects for the mortgage calculator."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional

from config import settings


class LoanType(str, Enum):
    PURCHASE = "purchase"
    REFINANCE = "refi"

    @classmethod
    def parse(cls, value: Any) -> "LoanType":
        if isinstance(value, LoanType):
            return value
        text = str(value or "").strip().lower()
        if text in ("refi", "refinance"):
            return cls.REFINANCE
        return cls.PURCHASE


def finite_or_zero(value: Any) -> float:
    """Coerce a user-supplied number to a finite float, falling back to 0."""
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


# camelCase keys match the saved-scenario blob written by the browser calculator
_FIELD_KEYS = {
    "home_value": "homeValue",
    "down_payment": "downPayment",
    "loan_amount": "loanAmount",
    "interest_rate": "interestRate",
    "loan_term_years": "loanTerm",
    "property_tax_yearly": "propertyTax",
    "pmi_rate_pct": "pmi",
    "home_insurance_yearly": "homeInsurance",
    "monthly_hoa": "monthlyHOA",
    "loan_type": "loanType",
}


@dataclass(frozen=True)
class LoanParameters:
    home_value: float
    down_payment: float
    loan_amount: float
    interest_rate: float  # annual percent
    loan_term_years: int

    # Yearly figures are normalized to monthly dollars by the calculations
    property_tax_yearly: float = 0.0
    pmi_rate_pct: float = 0.0
    home_insurance_yearly: float = 0.0
    monthly_hoa: float = 0.0
    loan_type: LoanType = LoanType.PURCHASE

    @classmethod
    def create(
        cls,
        home_value: float,
        down_payment: float,
        interest_rate: float,
        loan_term_years: int,
        loan_amount: Optional[float] = None,
        **costs: Any,
    ) -> "LoanParameters":
        """Build parameters, deriving the loan amount unless it is overridden."""
        if loan_amount is None:
            loan_amount = home_value - down_payment
        return cls(
            home_value=home_value,
            down_payment=down_payment,
            loan_amount=loan_amount,
            interest_rate=interest_rate,
            loan_term_years=loan_term_years,
            **costs,
        )

    @classmethod
    def defaults(cls) -> "LoanParameters":
        return cls.create(**settings.DEFAULT_LOAN_PARAMETERS)

    @property
    def down_payment_ratio(self) -> Optional[float]:
        if self.home_value <= 0:
            return None
        return self.down_payment / self.home_value

    def update(self, field_name: str, value: Any) -> "LoanParameters":
        """
        Return a copy with one field edited.

        Editing the home value or down payment re-derives the loan amount,
        discarding any manual override. Editing the loan amount itself is
        an override that sticks until the next such edit.
        """
        if field_name not in _FIELD_KEYS:
            raise ValueError(f"Unknown loan parameter: {field_name!r}")

        if field_name == "loan_type":
            return replace(self, loan_type=LoanType.parse(value))
        if field_name == "loan_term_years":
            return replace(self, loan_term_years=int(finite_or_zero(value)))

        updated = replace(self, **{field_name: finite_or_zero(value)})
        if field_name in ("home_value", "down_payment"):
            updated = replace(
                updated, loan_amount=updated.home_value - updated.down_payment
            )
        return updated

    def sanitized(self) -> "LoanParameters":
        return LoanParameters(
            home_value=finite_or_zero(self.home_value),
            down_payment=finite_or_zero(self.down_payment),
            loan_amount=finite_or_zero(self.loan_amount),
            interest_rate=finite_or_zero(self.interest_rate),
            loan_term_years=int(finite_or_zero(self.loan_term_years)),
            property_tax_yearly=finite_or_zero(self.property_tax_yearly),
            pmi_rate_pct=finite_or_zero(self.pmi_rate_pct),
            home_insurance_yearly=finite_or_zero(self.home_insurance_yearly),
            monthly_hoa=finite_or_zero(self.monthly_hoa),
            loan_type=LoanType.parse(self.loan_type),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for attr, key in _FIELD_KEYS.items():
            value = getattr(self, attr)
            data[key] = value.value if isinstance(value, LoanType) else value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoanParameters":
        base = cls.defaults().to_dict()
        base.update({k: v for k, v in data.items() if k in base})
        values = {attr: base[key] for attr, key in _FIELD_KEYS.items()}
        params = cls(**values).sanitized()
        if "loanAmount" not in data:
            params = replace(params, loan_amount=params.home_value - params.down_payment)
        return params


@dataclass(frozen=True)
class PaymentBreakdown:
    principal_and_interest: float
    tax: float
    pmi: float
    insurance: float
    hoa: float

    @property
    def total(self) -> float:
        return self.principal_and_interest + self.tax + self.pmi + self.insurance + self.hoa


@dataclass(frozen=True)
class AmortizationYear:
    year: int
    principal: float
    interest: float
    balance: float
    tax: float


@dataclass(frozen=True)
class RateSweep:
    span: float = field(default_factory=lambda: settings.RATE_SWEEP_SPAN)
    step: float = field(default_factory=lambda: settings.RATE_SWEEP_STEP)


@dataclass(frozen=True)
class RateComparisonRow:
    rate: float
    monthly_payment: float
    total_interest: float
    savings: float
    is_current: bool = False

    @property
    def annual_savings(self) -> float:
        return self.savings * 12


@dataclass(frozen=True)
class RefinanceInputs:
    current_balance: float
    new_rate: float
    new_term_years: int
    closing_costs: float
    years_owned: int = 0
    # Fall back to the loan parameters' rate and term when omitted
    current_rate: Optional[float] = None
    current_term_years: Optional[int] = None


@dataclass(frozen=True)
class RefinanceAnalysis:
    current_payment: float
    new_payment: float
    monthly_savings: float
    closing_costs: float
    break_even_months: float
    break_even_date: Optional[date]
    total_savings_5y: float
    total_savings_10y: float
    total_savings_lifetime: float
    is_worth_it: bool


@dataclass(frozen=True)
class SavedScenario:
    id: str
    name: str
    saved_at: str
    parameters: LoanParameters

    def to_dict(self) -> Dict[str, Any]:
        data = self.parameters.to_dict()
        data.update({"id": self.id, "name": self.name, "savedAt": self.saved_at})
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SavedScenario":
        scenario_id = data.get("id")
        name = data.get("name")
        if not scenario_id or not isinstance(name, str):
            raise ValueError("Saved scenario is missing an id or name")
        return cls(
            id=str(scenario_id),
            name=name,
            saved_at=str(data.get("savedAt", "")),
            parameters=LoanParameters.from_dict(data),
        )

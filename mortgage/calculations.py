import calendar
import math
from datetime import date
from typing import List, Optional

import pandas as pd

from config import settings

from .costs import compute_costs_monthly
from .models import (
    AmortizationYear,
    LoanParameters,
    PaymentBreakdown,
    RateComparisonRow,
    RateSweep,
    RefinanceAnalysis,
    RefinanceInputs,
    finite_or_zero,
)


def monthly_pi_payment(principal: float, annual_rate_pct: float, term_years: int) -> float:
    """
    Level monthly payment that retires ``principal`` in ``term_years``.

    With monthly rate r and n monthly payments: P * r(1+r)^n / ((1+r)^n - 1).

    A zero rate amortizes straight-line (P / n). A non-positive principal or
    term yields 0 rather than raising.
    """
    principal = finite_or_zero(principal)
    n = int(finite_or_zero(term_years)) * 12
    if principal <= 0 or n <= 0:
        return 0.0
    r = (finite_or_zero(annual_rate_pct) / 100.0) / 12.0
    if r == 0:
        return principal / n
    num = r * (1 + r) ** n
    den = (1 + r) ** n - 1
    return principal * (num / den)


def compute_breakdown(
    params: LoanParameters,
    principal: Optional[float] = None,
    annual_rate_pct: Optional[float] = None,
    term_years: Optional[int] = None,
) -> PaymentBreakdown:
    """
    Monthly payment split into P&I, tax, PMI, insurance and HOA.

    ``principal``, ``annual_rate_pct`` and ``term_years`` override the
    parameters' own values for the P&I figure only (rate comparison and
    refinance pricing). Tax, insurance, HOA and PMI always come from
    ``params``.
    """
    params = params.sanitized()
    pi = monthly_pi_payment(
        params.loan_amount if principal is None else principal,
        params.interest_rate if annual_rate_pct is None else annual_rate_pct,
        params.loan_term_years if term_years is None else term_years,
    )
    costs = compute_costs_monthly(params)
    return PaymentBreakdown(
        principal_and_interest=pi,
        tax=costs["property_tax_monthly"],
        pmi=costs["pmi_monthly"],
        insurance=costs["home_insurance_monthly"],
        hoa=costs["hoa_monthly"],
    )


def total_interest(params: LoanParameters, annual_rate_pct: Optional[float] = None) -> float:
    """Interest paid over the full term at a fixed P&I (total P&I minus principal)."""
    params = params.sanitized()
    pi = compute_breakdown(params, annual_rate_pct=annual_rate_pct).principal_and_interest
    return pi * params.loan_term_years * 12 - params.loan_amount


def compute_schedule(params: LoanParameters) -> List[AmortizationYear]:
    """
    Month-by-month amortization aggregated by year.

    P&I is fixed up front; interest is recomputed from the running balance
    each month. The reported balance is floored at 0 but the running one is
    not, and property tax is the same flat figure every year.
    """
    params = params.sanitized()
    r = (params.interest_rate / 100.0) / 12.0
    pi = compute_breakdown(params).principal_and_interest

    rows = []
    bal = params.loan_amount
    for year in range(1, params.loan_term_years + 1):
        interest_ytd = 0.0
        principal_ytd = 0.0

        for _ in range(12):
            interest = bal * r
            principal_paid = pi - interest
            interest_ytd += interest
            principal_ytd += principal_paid
            bal -= principal_paid

        rows.append(AmortizationYear(
            year=year,
            principal=principal_ytd,
            interest=interest_ytd,
            balance=max(0.0, bal),
            tax=params.property_tax_yearly,
        ))

    return rows


def schedule_frame(schedule: List[AmortizationYear]) -> pd.DataFrame:
    rows = [
        {
            "Year": row.year,
            "Principal": row.principal,
            "Interest": row.interest,
            "Ending Balance": row.balance,
            "Tax": row.tax,
        }
        for row in schedule
    ]
    return pd.DataFrame(rows, columns=["Year", "Principal", "Interest", "Ending Balance", "Tax"])


def _sweep_rates(current_rate: float, sweep: RateSweep) -> List[float]:
    span = abs(finite_or_zero(sweep.span))
    step = finite_or_zero(sweep.step)
    if step <= 0:
        return [round(current_rate, settings.RATE_DECIMALS)]

    # Centred on the current rate; whole steps only, never past the span
    half = math.floor(span / step + 1e-9)
    rates = set()
    for k in range(-half, half + 1):
        rates.add(round(current_rate + k * step, settings.RATE_DECIMALS))
    return sorted(rates)


def compute_rate_comparisons(
    params: LoanParameters,
    sweep: Optional[RateSweep] = None,
) -> List[RateComparisonRow]:
    """Price the loan across a band of rates around the current one, ascending."""
    params = params.sanitized()
    sweep = sweep or RateSweep()
    current_rate = round(params.interest_rate, settings.RATE_DECIMALS)
    current_total = compute_breakdown(params).total

    rows = []
    for rate in _sweep_rates(params.interest_rate, sweep):
        if rate <= 0:
            continue
        monthly = compute_breakdown(params, annual_rate_pct=rate).total
        rows.append(RateComparisonRow(
            rate=rate,
            monthly_payment=monthly,
            total_interest=total_interest(params, annual_rate_pct=rate),
            savings=current_total - monthly,
            is_current=rate == current_rate,
        ))
    return rows


def add_months(start: date, months: int) -> date:
    m_total = (start.year * 12 + (start.month - 1)) + months
    year = m_total // 12
    month = (m_total % 12) + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def compute_refinance(
    params: LoanParameters,
    refi: RefinanceInputs,
    today: Optional[date] = None,
) -> RefinanceAnalysis:
    """
    Compare the current loan with a proposed refinance.

    Both payments are fresh P&I estimates against the stated current
    balance (not a re-amortization of the existing schedule), plus the
    parameters' tax, insurance, PMI and HOA. Malformed refinance terms are
    the caller's responsibility and are not corrected here.
    """
    params = params.sanitized()
    today = today or date.today()

    balance = finite_or_zero(refi.current_balance)
    closing_costs = finite_or_zero(refi.closing_costs)
    new_term_years = int(finite_or_zero(refi.new_term_years))
    current_rate = params.interest_rate if refi.current_rate is None else refi.current_rate
    current_term = params.loan_term_years if refi.current_term_years is None else refi.current_term_years

    current_payment = compute_breakdown(
        params, principal=balance, annual_rate_pct=current_rate, term_years=current_term
    ).total
    new_payment = compute_breakdown(
        params, principal=balance, annual_rate_pct=refi.new_rate, term_years=new_term_years
    ).total
    monthly_savings = current_payment - new_payment

    if monthly_savings > 0:
        break_even_months = closing_costs / monthly_savings
        break_even_date = add_months(today, math.ceil(break_even_months))
    else:
        break_even_months = math.inf
        break_even_date = None

    def savings_after(months: int) -> float:
        return monthly_savings * months - closing_costs

    five_years, ten_years = settings.REFI_HORIZONS_MONTHS
    return RefinanceAnalysis(
        current_payment=current_payment,
        new_payment=new_payment,
        monthly_savings=monthly_savings,
        closing_costs=closing_costs,
        break_even_months=break_even_months,
        break_even_date=break_even_date,
        total_savings_5y=savings_after(five_years),
        total_savings_10y=savings_after(ten_years),
        total_savings_lifetime=savings_after(new_term_years * 12),
        is_worth_it=monthly_savings > 0 and break_even_months <= settings.REFI_WORTH_IT_MONTHS,
    )


def payoff_date(start: date, term_years: int) -> str:
    # last of n payments lands n-1 months after the first
    n = int(finite_or_zero(term_years)) * 12
    return add_months(start.replace(day=1), max(n - 1, 0)).strftime("%b. %Y")


def loan_summary(params: LoanParameters, start: Optional[date] = None) -> dict:
    """Headline figures shown next to the payment breakdown."""
    params = params.sanitized()
    breakdown = compute_breakdown(params)
    n = params.loan_term_years * 12
    return {
        "home_value": params.home_value,
        "loan_amount": params.loan_amount,
        "down_payment": params.down_payment,
        "pi": breakdown.principal_and_interest,
        "monthly_total": breakdown.total,
        "total_pi_paid": breakdown.principal_and_interest * n,
        "total_interest": total_interest(params),
        "payoff": payoff_date(start or date.today(), params.loan_term_years),
    }

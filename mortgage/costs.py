from config import settings

from .models import LoanParameters


def pmi_applies(params: LoanParameters) -> bool:
    ratio = params.down_payment_ratio
    return ratio is not None and ratio < settings.PMI_DOWN_PAYMENT_THRESHOLD


def compute_costs_monthly(params: LoanParameters) -> dict:
    """
    Normalize the non-amortizing costs to monthly amounts.

    Tax and insurance are entered yearly; HOA is already monthly. PMI is a
    yearly percent of the loan amount, charged only while the down payment
    is under 20% of the home value. It always reads the parameters' own
    loan amount and home value, even when the caller prices P&I against a
    different principal or rate.
    """
    pmi_monthly = 0.0
    if pmi_applies(params):
        pmi_monthly = params.loan_amount * (params.pmi_rate_pct / 100.0) / 12.0

    return {
        "property_tax_monthly": params.property_tax_yearly / 12.0,
        "home_insurance_monthly": params.home_insurance_yearly / 12.0,
        "hoa_monthly": params.monthly_hoa,
        "pmi_monthly": pmi_monthly,
    }

import pytest

from mortgage.models import LoanParameters
from scenarios.storage import InMemoryStore
from scenarios.store import ScenarioStore


@pytest.fixture
def params():
    """The calculator's opening form: $400k home, 20% down, 6.48% over 30 years."""
    return LoanParameters.create(
        home_value=400_000,
        down_payment=80_000,
        interest_rate=6.48,
        loan_term_years=30,
        property_tax_yearly=3_000,
        pmi_rate_pct=0.5,
        home_insurance_yearly=1_500,
        monthly_hoa=0,
    )


@pytest.fixture
def low_down_params(params):
    return params.update("down_payment", 40_000)


@pytest.fixture
def memory_backend():
    return InMemoryStore()


@pytest.fixture
def store(memory_backend):
    return ScenarioStore(memory_backend, key="savedMortgages")

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services.rate_limiter import rate_limiter
from app.validators import DiagnosticSnapshot


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    max_requests = rate_limiter.max_requests
    rate_limiter.reset()
    yield
    rate_limiter.max_requests = max_requests
    rate_limiter.reset()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_snapshot():
    def _make(**fields) -> DiagnosticSnapshot:
        return DiagnosticSnapshot(**fields)

    return _make


@pytest.fixture
def everything_wrong() -> dict:
    """Form data firing all ten rules."""
    return {
        "revenue": 100_000,
        "ebitda": 150_000,
        "growth": 200,
        "masseSalariale": 10,
        "effectif": "50+",
        "remunerationDirigeant": 60_000,
        "dettesFinancieres": 100_000,
        "tresorerieActuelle": 10_000,
        "mrrMensuel": 30_000,
        "pappersCA": 300_000,
        "pappersEBITDA": 50_000,
        "pappersTresorerie": 50_000,
        "pappersDettes": 20_000,
    }

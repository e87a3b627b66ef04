from pathlib import Path

import pytest

from paid_access.adapters.gateway_stub import StubGateway
from paid_access.rules.loader import load_rules
from paid_access.rules.models import Rules

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def rules_path() -> Path:
    path = PROJECT_ROOT / "rules.yaml"
    if not path.exists():
        raise FileNotFoundError(f"Rules not found at {path}")
    return path


@pytest.fixture
def rules(rules_path: Path) -> Rules:
    """REAL rules from the project root."""
    return load_rules(rules_path)


@pytest.fixture
def gateway(rules: Rules) -> StubGateway:
    """Stub gateway reporting tokens the way the configured gateway does."""
    return StubGateway(
        token_field=rules.gateway.token_field,
        token_prefix=rules.gateway.token_prefix or "pay_",
    )

from datetime import datetime
from pathlib import Path

import pytest

from koperasi.adapters.clock import FixedClock
from koperasi.rules.loader import load_rules
from koperasi.rules.models import ClientRules

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fixed_clock() -> FixedClock:
    """Clock frozen at 17 May 2024, 10:30 local time."""
    return FixedClock(datetime(2024, 5, 17, 10, 30))


@pytest.fixture
def project_rules() -> ClientRules:
    """Rules loaded from the real rules.yaml at the project root."""
    rules_path = PROJECT_ROOT / "rules.yaml"
    if not rules_path.exists():
        raise FileNotFoundError(f"Rules not found at {rules_path}")
    return load_rules(rules_path)

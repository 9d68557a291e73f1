from datetime import datetime

import pytest

from lingua_progress.models.progress import ProgressLedger

# Wednesday; the preceding Sunday is 2026-03-01
WEDNESDAY = datetime(2026, 3, 4, 10, 30, 0)


@pytest.fixture
def now():
    return WEDNESDAY


@pytest.fixture
def ledger():
    return ProgressLedger(user_id="user_1", language="spanish")

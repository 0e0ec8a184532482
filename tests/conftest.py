"""
Shared fixtures for Safe Ledger tests.

Every test gets a fresh in-memory database and a ledger whose clock is frozen
at Sunday 2026-03-15 10:30, so "today", the selected month and the default
report window are stable.
"""

from datetime import datetime

import pytest

from database.db_manager import DatabaseManager
from main import Ledger

FROZEN_NOW = datetime(2026, 3, 15, 10, 30)


@pytest.fixture
def frozen_now():
    return FROZEN_NOW


@pytest.fixture
def db():
    manager = DatabaseManager(":memory:")
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def ledger(db, frozen_now):
    ledger = Ledger(db, clock=lambda: frozen_now)
    ledger.store.load()
    return ledger


@pytest.fixture
def store(ledger):
    return ledger.store


@pytest.fixture
def mei_account(ledger):
    return ledger.accounts.create("MEI Principal", cnpj="12.345.678/0001-90")

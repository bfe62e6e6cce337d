"""Shared fixtures for Flow Ledger tests."""

from datetime import date

import pytest

from flow_ledger.audit import AuditLogger
from flow_ledger.config import get_settings
from flow_ledger.ledger import LedgerEngine
from flow_ledger.services.storage import InMemoryStorage


TODAY = date(2026, 3, 15)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def audit_logger():
    return AuditLogger(history_size=100)


@pytest.fixture
def engine(storage, audit_logger):
    """An empty ledger (no seed data) with a fixed clock."""
    return LedgerEngine(
        storage,
        audit_logger=audit_logger,
        seed_defaults=False,
        clock=lambda: TODAY,
    )


@pytest.fixture
def seeded_engine(storage, audit_logger):
    return LedgerEngine(storage, audit_logger=audit_logger, clock=lambda: TODAY)


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch, tmp_path):
    """Keep tests away from any real .env file and the cached settings."""
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def expense(description, amount, category="Other", day="2026-03-01", **extra):
    return {
        "description": description,
        "amount": amount,
        "type": "expense",
        "category": category,
        "date": day,
        **extra,
    }


def income(description, amount, category="Other", day="2026-03-01", **extra):
    return {
        "description": description,
        "amount": amount,
        "type": "income",
        "category": category,
        "date": day,
        **extra,
    }

"""Shared test fixtures for the quality gates test suite."""
from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest

from src.quality_gates.services.gate_store import QualityGateStore
from src.quality_gates.services.project_finder import QgateProjectFinder
from src.shared.db.connection import ConnectionPool
from src.shared.db.schema import init_quality_gates_db
from src.shared.models.measures import (
    Characteristic,
    Measurement,
    Requirement,
    Rule,
    rule_measure,
)


@pytest.fixture
def tmp_db_path(tmp_path: Path) -> Path:
    """Provide a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
def connection_pool(tmp_db_path: Path) -> Generator[ConnectionPool, None, None]:
    """Provide a ConnectionPool with a temporary database."""
    pool = ConnectionPool(tmp_db_path)
    yield pool
    pool.close()


@pytest.fixture
def gates_pool(connection_pool: ConnectionPool) -> ConnectionPool:
    """Provide a ConnectionPool with the quality gates schema applied."""
    init_quality_gates_db(connection_pool)
    return connection_pool


@pytest.fixture
def gate_store(gates_pool: ConnectionPool) -> QualityGateStore:
    return QualityGateStore(gates_pool)


@pytest.fixture
def project_finder(gates_pool: ConnectionPool) -> QgateProjectFinder:
    return QgateProjectFinder(gates_pool)


@pytest.fixture
def null_rule() -> Rule:
    return Rule(repository_key="squid", key="AvoidNull")


@pytest.fixture
def cycle_rule() -> Rule:
    return Rule(repository_key="squid", key="AvoidCycles")


@pytest.fixture
def reliability() -> Characteristic:
    return Characteristic(key="RELIABILITY")


@pytest.fixture
def portability() -> Characteristic:
    return Characteristic(key="PORTABILITY")


@pytest.fixture
def exception_handling() -> Requirement:
    return Requirement(key="EXCEPTION_HANDLING")


@pytest.fixture
def coverage_measures(null_rule: Rule) -> list[Measurement]:
    """A plain coverage measurement followed by a rule-attributed one."""
    return [
        Measurement(metric_key="coverage", value=80.0),
        rule_measure("coverage", null_rule, value=3.0),
    ]

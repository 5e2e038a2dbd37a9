"""Pytest configuration and fixtures."""

import pytest
from sqlalchemy import create_engine

import storage


@pytest.fixture
def db(tmp_path, monkeypatch):
    """Point storage at a fresh SQLite file for the duration of a test."""
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setattr(storage, "_engine", engine)
    storage.init_db()
    yield engine
    engine.dispose()


@pytest.fixture
def healthy_metrics():
    """Metrics that score 0 with exercise set to none."""
    return {
        "age": 30,
        "systolic_bp": 110,
        "diastolic_bp": 70,
        "total_cholesterol": 150,
        "hdl_cholesterol": 60,
        "height_cm": 175,
        "weight_kg": 70,
        "exercise": "none",
    }

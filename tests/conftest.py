from __future__ import annotations

from datetime import datetime

import pytest

from src.catering_system.catering_system.container import build_container
from src.catering_system.catering_system.main import create_app

FIXED_NOW = datetime(2025, 9, 30, 12, 0, 0)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def container(fixed_now):
    return build_container(clock=lambda: fixed_now)


@pytest.fixture
def catering(container):
    """Weekday school lunch, Sep 1 - Dec 19 2025, cutoff 08:00 on the day."""
    return container.catering_service.create_catering(
        name="School Lunch",
        start_date="2025-09-01",
        end_date="2025-12-19",
        meals=["Breakfast", "Lunch"],
        active_weekdays=["Mon", "Tue", "Wed", "Thu", "Fri"],
        cutoff_time="08:00",
    )


@pytest.fixture
def client(container):
    app = create_app("config.testing", container=container)
    return app.test_client()

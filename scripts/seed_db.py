"""Seed a demo catering with a small group tree through the service layer."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.catering_system.catering_system.container import Container, build_container
from src.catering_system.catering_system.core.enums import ErrorKind
from src.catering_system.catering_system.core.exceptions import ValidationError

DEMO_NAME = "Demo School Lunch"


def seed(container: Container) -> int:
    if container.caterings_repo.get_by_name(DEMO_NAME):
        raise ValidationError(f"'{DEMO_NAME}' already exists", kind=ErrorKind.DUPLICATE_NAME)

    catering = container.catering_service.create_catering(
        name=DEMO_NAME,
        start_date="2025-09-01",
        end_date="2026-06-30",
        meals=["Breakfast", "Lunch"],
        active_weekdays=["Mon", "Tue", "Wed", "Thu", "Fri"],
        cutoff_time="08:00",
    )
    for class_name, kids in {
        "Class 1A": [("Ana", "Novak"), ("Ivo", "Horvat")],
        "Class 1B": [("Mia", "Kovač"), ("Luka", "Babić"), ("Sara", "Marić")],
    }.items():
        group = container.group_service.add_group(parent_group_id=catering.root_group_id, name=class_name)
        for first_name, last_name in kids:
            container.student_service.add_student(group_id=group.group_id, first_name=first_name, last_name=last_name)
    return catering.catering_id


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(backend=settings.STORE_BACKEND, db_config=dict(settings.DB_CONFIG))
    catering_id = seed(container)
    print(f"OK: Seeded '{DEMO_NAME}' (catering_id={catering_id}, backend={container.backend.value})")


if __name__ == "__main__":
    main()

"""Example: use the service layer directly (no Flask).

Controllers are thin; everything below is what the HTTP API calls into.
"""

from datetime import datetime

from src.catering_system.catering_system.container import build_container


def main():
    container = build_container()

    catering = container.catering_service.create_catering(
        name="Kindergarten Lunch",
        start_date="2025-10-01",
        end_date="2025-10-31",
        meals=["Lunch"],
        active_weekdays=["Mon", "Wed", "Fri"],
        cutoff_time="09:00",
    )
    group = container.group_service.add_group(parent_group_id=catering.root_group_id, name="Bears")
    kid = container.student_service.add_student(group_id=group.group_id, first_name="Ana", last_name="Novak")

    container.cancellation_service.set_cancellation(
        student_id=kid.student_id,
        catering_id=catering.catering_id,
        day="2025-10-03",
        cancelled=True,
        now=datetime(2025, 10, 2, 18, 0),
    )

    view = container.attendance_service.get_month_view(catering_id=catering.catering_id, year=2025, month=10)
    for d in view.days:
        if d.active:
            print(d.day.isoformat(), d.meals)


if __name__ == "__main__":
    main()

from __future__ import annotations

import csv
import io
from dataclasses import asdict

from flask import Flask, jsonify

from ..common.datetime_utils import format_date
from ..container import Container
from ..core.constants import SUMMARY_CSV_FIELDS
from .model import MonthView


def month_view_to_dict(view: MonthView) -> dict:
    return {
        "catering_id": view.catering_id,
        "group_id": view.group_id,
        "year": view.year,
        "month": view.month,
        "meals": list(view.meals),
        "days": [
            {"day": format_date(d.day), "active": d.active, "meals": dict(d.meals)}
            for d in view.days
        ],
    }


def register(app: Flask, container: Container) -> None:
    def _write_summary_csv(*, rows, filename: str):
        """Write per-student monthly summary rows to a CSV response."""

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=list(SUMMARY_CSV_FIELDS))
        writer.writeheader()
        for r in rows:
            writer.writerow(asdict(r))

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/attendance/<int:catering_id>/<int:year>/<int:month>", methods=["GET"], endpoint="attendance_month")
    def attendance_month(catering_id: int, year: int, month: int):
        view = container.attendance_service.get_month_view(catering_id=catering_id, year=year, month=month)
        return jsonify(month_view_to_dict(view))

    @app.route(
        "/api/attendance/groups/<int:group_id>/<int:year>/<int:month>",
        methods=["GET"],
        endpoint="attendance_group_month",
    )
    def attendance_group_month(group_id: int, year: int, month: int):
        view = container.attendance_service.get_group_month_view(group_id=group_id, year=year, month=month)
        return jsonify(month_view_to_dict(view))

    @app.route(
        "/api/attendance/groups/<int:group_id>/breakdown/<day>",
        methods=["GET"],
        endpoint="attendance_breakdown",
    )
    def attendance_breakdown(group_id: int, day: str):
        rows = container.attendance_service.get_day_breakdown(group_id=group_id, day=day)
        return jsonify([asdict(r) for r in rows])

    @app.route(
        "/api/attendance/<int:catering_id>/<int:year>/<int:month>/summary.csv",
        methods=["GET"],
        endpoint="attendance_summary_csv",
    )
    def attendance_summary_csv(catering_id: int, year: int, month: int):
        rows = container.attendance_service.get_monthly_summary(catering_id=catering_id, year=year, month=month)
        return _write_summary_csv(rows=rows, filename=f"attendance_{catering_id}_{year:04d}{month:02d}.csv")

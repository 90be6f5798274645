from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_date
from ..common.http import json_body
from ..container import Container
from .model import CancellationEvent, CancellationRecord


def record_to_dict(r: CancellationRecord) -> dict:
    return {
        "student_id": r.student_id,
        "catering_id": r.catering_id,
        "day": format_date(r.day),
        "cancelled": r.cancelled,
        "recorded_at": r.recorded_at.isoformat(timespec="seconds"),
    }


def event_to_dict(e: CancellationEvent) -> dict:
    return {"event_id": e.event_id, **record_to_dict(e)}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/cancellations", methods=["PUT"], endpoint="cancellations_set")
    def cancellations_set():
        data = json_body()
        container.cancellation_service.set_cancellation(
            student_id=int(data.get("student_id") or 0),
            catering_id=int(data.get("catering_id") or 0),
            day=data.get("day") or "",
            cancelled=bool(data.get("cancelled", True)),
        )
        return jsonify({"success": True})

    @app.route("/api/cancellations", methods=["GET"], endpoint="cancellations_get")
    def cancellations_get():
        record = container.cancellation_service.get_cancellation(
            student_id=request.args.get("student_id", 0, type=int),
            catering_id=request.args.get("catering_id", 0, type=int),
            day=request.args.get("day") or "",
        )
        if record is None:
            return jsonify({"cancelled": False})
        return jsonify(record_to_dict(record))

    @app.route("/api/cancellations/range", methods=["POST"], endpoint="cancellations_range")
    def cancellations_range():
        data = json_body()
        changed = container.cancellation_service.cancel_range(
            student_id=int(data.get("student_id") or 0),
            catering_id=int(data.get("catering_id") or 0),
            start=data.get("start") or "",
            end=data.get("end") or "",
            cancelled=bool(data.get("cancelled", True)),
        )
        return jsonify({"changed": [format_date(d) for d in changed]})

    @app.route("/api/cancellations/history", methods=["GET"], endpoint="cancellations_history")
    def cancellations_history():
        events = container.cancellation_service.history(
            student_id=request.args.get("student_id", 0, type=int),
            catering_id=request.args.get("catering_id", 0, type=int),
            day=request.args.get("day") or "",
        )
        return jsonify([event_to_dict(e) for e in events])

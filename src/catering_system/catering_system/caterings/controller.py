from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_date, format_time
from ..common.http import json_body
from ..container import Container
from .model import Catering


def catering_to_dict(c: Catering) -> dict:
    return {
        "catering_id": c.catering_id,
        "name": c.name,
        "start_date": format_date(c.start_date),
        "end_date": format_date(c.end_date),
        "meals": list(c.meals),
        "active_weekdays": [d.value for d in sorted(c.active_weekdays, key=lambda d: d.position)],
        "cutoff_time": format_time(c.cutoff_time),
        "root_group_id": c.root_group_id,
        "archived": c.archived,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/caterings", methods=["GET"], endpoint="caterings_list")
    def caterings_list():
        include_archived = request.args.get("archived") in {"1", "true", "yes"}
        items = container.catering_service.list_caterings(include_archived=include_archived)
        return jsonify([catering_to_dict(c) for c in items])

    @app.route("/api/caterings", methods=["POST"], endpoint="caterings_create")
    def caterings_create():
        data = json_body()
        catering = container.catering_service.create_catering(
            name=data.get("name"),
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
            meals=data.get("meals"),
            active_weekdays=data.get("active_weekdays"),
            cutoff_time=data.get("cutoff_time"),
        )
        app.logger.info("created catering %s (%s)", catering.catering_id, catering.name)
        return jsonify(catering_to_dict(catering)), 201

    @app.route("/api/caterings/<int:catering_id>", methods=["GET"], endpoint="caterings_get")
    def caterings_get(catering_id: int):
        return jsonify(catering_to_dict(container.catering_service.get_catering(catering_id)))

    @app.route("/api/caterings/<int:catering_id>", methods=["PUT"], endpoint="caterings_update")
    def caterings_update(catering_id: int):
        # Fields left out of the body keep their current value.
        current = catering_to_dict(container.catering_service.get_catering(catering_id))
        data = {**current, **json_body()}
        catering = container.catering_service.update_catering(
            catering_id=catering_id,
            name=data.get("name"),
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
            meals=data.get("meals"),
            active_weekdays=data.get("active_weekdays"),
            cutoff_time=data.get("cutoff_time"),
        )
        return jsonify(catering_to_dict(catering))

    @app.route("/api/caterings/<int:catering_id>/archive", methods=["POST"], endpoint="caterings_archive")
    def caterings_archive(catering_id: int):
        container.catering_service.archive_catering(catering_id=catering_id)
        return jsonify({"success": True})

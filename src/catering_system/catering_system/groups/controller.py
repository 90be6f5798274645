from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body
from ..container import Container
from ..students.controller import student_to_dict
from .model import Group


def group_to_dict(g: Group) -> dict:
    return {
        "group_id": g.group_id,
        "name": g.name,
        "parent_id": g.parent_id,
        "catering_id": g.catering_id,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/groups", methods=["POST"], endpoint="groups_create")
    def groups_create():
        data = json_body()
        group = container.group_service.add_group(
            parent_group_id=int(data.get("parent_id") or 0),
            name=data.get("name") or "",
        )
        return jsonify(group_to_dict(group)), 201

    @app.route("/api/groups/<int:group_id>", methods=["GET"], endpoint="groups_get")
    def groups_get(group_id: int):
        group = container.group_service.get_group(group_id)
        return jsonify(
            {
                **group_to_dict(group),
                "breadcrumb": [group_to_dict(g) for g in container.group_service.breadcrumb(group_id=group_id)],
                "children": [group_to_dict(g) for g in container.group_service.list_children(group_id=group_id)],
                "students": [student_to_dict(s) for s in container.student_service.list_in_group(group_id=group_id)],
            }
        )

    @app.route("/api/groups/<int:group_id>", methods=["PUT"], endpoint="groups_rename")
    def groups_rename(group_id: int):
        group = container.group_service.rename_group(group_id=group_id, name=json_body().get("name") or "")
        return jsonify(group_to_dict(group))

    @app.route("/api/groups/<int:group_id>/move", methods=["POST"], endpoint="groups_move")
    def groups_move(group_id: int):
        group = container.group_service.move_group(
            group_id=group_id,
            new_parent_id=int(json_body().get("parent_id") or 0),
        )
        return jsonify(group_to_dict(group))

    @app.route("/api/groups/<int:group_id>", methods=["DELETE"], endpoint="groups_remove")
    def groups_remove(group_id: int):
        removal = container.group_service.remove_group(group_id=group_id)
        app.logger.info("removed %d groups and %d students under group %s", removal.groups, removal.students, group_id)
        return jsonify({"success": True, "removed_groups": removal.groups, "removed_students": removal.students})

from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body
from ..container import Container
from .model import Student


def student_to_dict(s: Student) -> dict:
    return {
        "student_id": s.student_id,
        "first_name": s.first_name,
        "last_name": s.last_name,
        "group_id": s.group_id,
        "allergies": s.allergies,
        "guardians": list(s.guardians),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students", methods=["POST"], endpoint="students_create")
    def students_create():
        data = json_body()
        student = container.student_service.add_student(
            group_id=int(data.get("group_id") or 0),
            first_name=data.get("first_name") or "",
            last_name=data.get("last_name") or "",
            allergies=data.get("allergies"),
            guardians=data.get("guardians") or [],
        )
        return jsonify(student_to_dict(student)), 201

    @app.route("/api/students/<int:student_id>", methods=["GET"], endpoint="students_get")
    def students_get(student_id: int):
        return jsonify(student_to_dict(container.student_service.get_student(student_id)))

    @app.route("/api/students/<int:student_id>", methods=["PUT"], endpoint="students_update")
    def students_update(student_id: int):
        current = student_to_dict(container.student_service.get_student(student_id))
        data = {**current, **json_body()}
        student = container.student_service.update_student(
            student_id=student_id,
            first_name=data.get("first_name") or "",
            last_name=data.get("last_name") or "",
            allergies=data.get("allergies"),
            guardians=data.get("guardians") or [],
        )
        return jsonify(student_to_dict(student))

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="students_remove")
    def students_remove(student_id: int):
        container.student_service.remove_student(student_id=student_id)
        return jsonify({"success": True})

    @app.route("/api/students/<int:student_id>/move", methods=["POST"], endpoint="students_move")
    def students_move(student_id: int):
        student = container.student_service.move_student(
            student_id=student_id,
            group_id=int(json_body().get("group_id") or 0),
        )
        return jsonify(student_to_dict(student))

from __future__ import annotations

from flask import Flask, request

from ..common.responses import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employee", methods=["GET"], endpoint="get_employee")
    def get_employee():
        employee_id = request.args.get("id") or app.config.get("DEMO_EMPLOYEE_ID")
        employee = container.employee_service.get_employee(employee_id)
        return ok(employee.to_dict())

    @app.route("/api/employee", methods=["POST"], endpoint="create_employee")
    def create_employee():
        data = json_body()
        employee = container.employee_service.create_employee(
            name=data.get("name"),
            email=data.get("email"),
            role=data.get("role"),
        )
        return ok(employee.to_dict(), 201)

    @app.route("/api/employee/photos", methods=["POST"], endpoint="register_photos")
    def register_photos():
        data = json_body()
        employee = container.employee_service.register_photos(data.get("employeeId"), data.get("photos"))
        return ok({"faceImages": list(employee.face_images)})

    @app.route("/api/employee/photos", methods=["DELETE"], endpoint="remove_photo")
    def remove_photo():
        employee = container.employee_service.remove_photo(
            request.args.get("employeeId"),
            request.args.get("photoUrl"),
        )
        return ok({"faceImages": list(employee.face_images)})

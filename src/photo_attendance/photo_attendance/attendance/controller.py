from __future__ import annotations

from flask import Flask, request

from ..common.responses import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["POST"], endpoint="mark_attendance")
    def mark_attendance():
        data = json_body()
        result = container.attendance_service.mark_attendance(data.get("employeeId"), data.get("photo"))
        return ok(result.record.to_dict(), 201, confidence=result.confidence)

    @app.route("/api/attendance/checkout", methods=["POST"], endpoint="mark_checkout")
    def mark_checkout():
        data = json_body()
        result = container.attendance_service.mark_checkout(data.get("employeeId"))
        return ok(result.to_dict())

    @app.route("/api/attendance/today", methods=["GET"], endpoint="today_attendance")
    def today_attendance():
        record = container.attendance_service.get_today_record(request.args.get("employeeId"))
        return ok(record.to_dict() if record else None)

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    def attendance_history():
        history = container.attendance_service.get_history(
            request.args.get("employeeId"),
            month=request.args.get("month") or None,
            page=request.args.get("page", 1),
            limit=request.args.get("limit", 10),
        )
        return ok(history.to_dict())

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    def attendance_summary():
        employee_id = request.args.get("employeeId")
        monthly = container.analytics_service.monthly_summary(employee_id, month=request.args.get("month") or None)
        weekly = container.analytics_service.weekly_breakdown(employee_id)
        return ok({"monthly": monthly.to_dict(), "weekly": [d.to_dict() for d in weekly]})

    @app.route("/api/attendance/calendar", methods=["GET"], endpoint="attendance_calendar")
    def attendance_calendar():
        days = container.analytics_service.calendar(
            request.args.get("employeeId"),
            month=request.args.get("month") or None,
        )
        return ok([d.to_dict() for d in days])

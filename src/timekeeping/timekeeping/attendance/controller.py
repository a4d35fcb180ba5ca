from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify

from ..common.http import api_endpoint, json_body, optional_date, optional_datetime, require_date, uploaded_text
from ..common.validators import optional_int_list
from ..container import Container
from .model import ProcessedAttendance


def _row_json(row: ProcessedAttendance) -> dict:
    data = asdict(row)
    for key, value in data.items():
        if hasattr(value, "isoformat"):
            data[key] = value.isoformat()
        elif hasattr(value, "value"):
            data[key] = value.value
    return data


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/sync", methods=["POST"], endpoint="attendance_sync")
    @api_endpoint
    def sync_all():
        data = json_body()
        result = container.sync_service.sync(optional_date(data, "start_date"), optional_date(data, "end_date"))
        return jsonify(
            {
                "success": True,
                "message": result.message,
                "details": {
                    "synced_count": result.synced_count,
                    "created_records": result.created_records,
                    "error_count": result.error_count,
                    "total_processed": result.total_processed,
                    "errors": result.errors,
                },
            }
        )

    @app.route("/api/attendance/<int:attendance_id>/sync", methods=["POST"], endpoint="attendance_sync_one")
    @api_endpoint
    def sync_one(attendance_id: int):
        row, updated = container.sync_service.sync_individual(attendance_id)
        message = "Attendance synced successfully" if updated else "Attendance already up to date"
        return jsonify({"success": True, "message": message, "updated": updated, "data": _row_json(row)})

    @app.route("/api/attendance/recalculate", methods=["POST"], endpoint="attendance_recalculate")
    @api_endpoint
    def recalculate():
        data = json_body()
        count = container.attendance_service.recalculate_metrics(
            require_date(data, "start_date"),
            require_date(data, "end_date"),
            department=data.get("department") or None,
        )
        return jsonify({"success": True, "message": f"{count} records updated", "updated_count": count})

    @app.route("/api/attendance/<int:attendance_id>", methods=["PUT"], endpoint="attendance_update")
    @api_endpoint
    def update(attendance_id: int):
        data = json_body()
        row = container.attendance_service.update_record(
            attendance_id,
            time_in=optional_datetime(data, "time_in"),
            time_out=optional_datetime(data, "time_out"),
            break_in=optional_datetime(data, "break_in"),
            break_out=optional_datetime(data, "break_out"),
            next_day_timeout=optional_datetime(data, "next_day_timeout"),
            is_nightshift=bool(data.get("is_nightshift")),
            trip=data.get("trip") or 0,
        )
        return jsonify({"success": True, "message": "Attendance record updated successfully", "data": _row_json(row)})

    @app.route("/api/attendance/holiday", methods=["POST"], endpoint="attendance_holiday")
    @api_endpoint
    def set_holiday():
        data = json_body()
        count = container.attendance_service.set_holiday(
            require_date(data, "date"),
            data.get("multiplier"),
            department=data.get("department") or None,
            employee_ids=optional_int_list(data.get("employee_ids")),
        )
        return jsonify({"success": True, "message": f"Holiday set for {count} records", "updated_count": count})

    @app.route("/api/attendance/import", methods=["POST"], endpoint="attendance_import")
    @api_endpoint
    def import_csv():
        result = container.attendance_service.import_csv(uploaded_text())
        return jsonify(
            {
                "success": True,
                "message": result.message,
                "imported": result.imported,
                "updated": result.updated,
                "errors": result.errors,
            }
        )

    @app.route("/api/attendance/bulk-delete", methods=["POST"], endpoint="attendance_bulk_delete")
    @api_endpoint
    def bulk_delete():
        data = json_body()
        employee_id = data.get("employee_id")
        result = container.attendance_service.bulk_delete(
            ids=optional_int_list(data.get("ids")),
            start_date=optional_date(data, "start_date"),
            end_date=optional_date(data, "end_date"),
            employee_id=int(employee_id) if employee_id else None,
            department=data.get("department") or None,
        )
        return jsonify(
            {
                "success": True,
                "message": f"{result.deleted_count} records deleted",
                "deleted_count": result.deleted_count,
                "errors": result.errors,
            }
        )

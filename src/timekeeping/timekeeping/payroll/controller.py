from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import api_endpoint, json_body
from ..common.validators import optional_int_list
from ..container import Container
from ..core.exceptions import ValidationError


def _period_args(data) -> tuple[int, int, str]:
    try:
        year = int(data.get("year"))
        month = int(data.get("month"))
    except (TypeError, ValueError):
        raise ValidationError("year and month are required integers")
    period_type = data.get("period_type")
    if not period_type:
        raise ValidationError("period_type is required")
    return year, month, str(period_type)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payroll/preview", methods=["GET"], endpoint="payroll_preview")
    @api_endpoint
    def preview():
        year, month, period_type = _period_args(request.args)
        preview = container.payroll_service.preview(
            year,
            month,
            period_type,
            department=request.args.get("department") or None,
            employee_ids=optional_int_list(request.args.getlist("employee_ids")),
        )
        return jsonify(
            {
                "success": True,
                "preview": preview.summaries,
                "totals": preview.totals,
                "employees": preview.employee_count,
                "records": preview.attendance_count,
            }
        )

    @app.route("/api/payroll/post", methods=["POST"], endpoint="payroll_post")
    @api_endpoint
    def post():
        data = json_body()
        year, month, period_type = _period_args(data)
        posted_by = data.get("posted_by")
        result = container.payroll_service.post(
            year,
            month,
            period_type,
            department=data.get("department") or None,
            employee_ids=optional_int_list(data.get("employee_ids")),
            posted_by=int(posted_by) if posted_by else None,
        )
        return jsonify(
            {
                "success": True,
                "message": result.message,
                "posted_count": result.posted_count,
                "updated_count": result.updated_count,
                "errors": result.errors,
            }
        )

    @app.route("/api/payroll/summaries/<int:summary_id>/unpost", methods=["POST"], endpoint="payroll_unpost")
    @api_endpoint
    def unpost(summary_id: int):
        unlocked = container.payroll_service.unpost(summary_id)
        return jsonify(
            {"success": True, "message": f"Summary returned to draft, {unlocked} records unlocked", "unlocked": unlocked}
        )

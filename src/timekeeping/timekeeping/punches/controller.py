from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import api_endpoint, json_body, require_date, uploaded_text
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/punches/import", methods=["POST"], endpoint="punches_import")
    @api_endpoint
    def import_punches():
        result = container.punch_service.import_csv(uploaded_text())
        return jsonify(
            {
                "success": True,
                "message": result.message,
                "saved": result.saved,
                "skipped": result.skipped,
                "created": result.created,
                "updated": result.updated,
                "errors": result.errors,
            }
        )

    @app.route("/api/punches/process", methods=["POST"], endpoint="punches_process")
    @api_endpoint
    def process_punches():
        data = json_body()
        created, updated = container.punch_service.process_range(
            require_date(data, "start_date"), require_date(data, "end_date")
        )
        return jsonify(
            {
                "success": True,
                "message": f"{created} records created, {updated} records updated",
                "created": created,
                "updated": updated,
            }
        )

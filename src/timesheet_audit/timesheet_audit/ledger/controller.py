from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.web import api_login_required, date_arg
from ..core.exceptions import StorageError, ValidationError
from ..container import Container
from .export import render_audit_csv

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/audit", methods=["GET"], endpoint="api_audit_list")
    @api_login_required
    def api_audit_list():
        table = request.args.get("table") or None
        record_id = request.args.get("record_id")
        try:
            if table and record_id:
                if not record_id.isdigit():
                    raise ValidationError("record_id must be a number")
                entries = container.ledger.history(table, int(record_id))
            else:
                limit = request.args.get("limit", "50")
                entries = container.ledger.recent(
                    limit=int(limit) if limit.isdigit() else 50,
                    table_name=table,
                    action=request.args.get("action") or None,
                )
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except StorageError:
            logger.exception("Audit list failed")
            return jsonify({"success": False, "message": "Audit log unavailable"}), 500

        return jsonify([e.to_dict() for e in entries])

    @app.route("/api/audit/verify", methods=["GET"], endpoint="api_audit_verify")
    @api_login_required
    def api_audit_verify():
        try:
            report = container.verify_audit_chain()
        except StorageError:
            logger.exception("Audit verification failed")
            return jsonify({"success": False, "message": "Audit log unavailable"}), 500
        return jsonify(report.to_dict())

    @app.route("/api/audit/export", methods=["GET"], endpoint="api_audit_export")
    @api_login_required
    def api_audit_export():
        try:
            start = date_arg("from")
            end = date_arg("to")
            table = request.args.get("table") or None
            entries = container.export_audit_range(start, end, table)
            if request.args.get("format") == "json":
                return jsonify([e.to_dict() for e in entries])

            report = container.verify_audit_chain()
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except StorageError:
            logger.exception("Audit export failed")
            return jsonify({"success": False, "message": "Audit log unavailable"}), 500

        csv_bytes = render_audit_csv(entries, report, exported_at=container.clock())
        filename = f"audit_log_{start.isoformat()}_{end.isoformat()}.csv"
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.validators import optional_int
from ..common.web import api_login_required, date_arg, json_body
from ..core.constants import DEFAULT_FINDINGS_REPORT_DAYS
from ..core.exceptions import StorageError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/time-entries/validate", methods=["POST"], endpoint="api_time_entry_validate")
    @api_login_required
    def api_time_entry_validate():
        try:
            data = json_body()
            result = container.validate_time_entry(
                data.get("employee_id"),
                parse_iso_date(data.get("work_date")),
                data.get("start"),
                data.get("end"),
                data.get("break_minutes", 0),
                data.get("exclude_entry_id"),
            )
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except StorageError:
            logger.exception("Time entry validation failed")
            return jsonify({"success": False, "message": "Validation unavailable"}), 500
        return jsonify({"success": True, "validation": result.to_dict()})

    @app.route("/api/check-breaks", methods=["POST"], endpoint="api_check_breaks")
    @api_login_required
    def api_check_breaks():
        try:
            data = json_body()
            findings = container.compliance_service.check_breaks(
                start=data.get("start"),
                end=data.get("end"),
                break_minutes=data.get("break_minutes", 0),
            )
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except StorageError:
            logger.exception("Break check failed")
            return jsonify({"success": False, "message": "Break rules unavailable"}), 500
        return jsonify({"success": True, "violations": [f.to_dict() for f in findings]})

    @app.route("/api/compliance/findings", methods=["GET"], endpoint="api_compliance_findings")
    @api_login_required
    def api_compliance_findings():
        try:
            end = date_arg("to", required=False) or container.clock().date()
            start = date_arg("from", required=False) or end - timedelta(days=DEFAULT_FINDINGS_REPORT_DAYS)
            employee_id = optional_int(request.args.get("employee_id"), "employee_id")
            data = container.compliance_report_service.build_findings_report(
                start=start, end=end, employee_id=employee_id
            )
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except StorageError:
            logger.exception("Findings report failed")
            return jsonify({"success": False, "message": "Audit log unavailable"}), 500
        return jsonify({"findings": data.rows, "stats": data.summary})

from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..common.datetime_utils import parse_iso_date
from ..common.web import api_login_required, client_ip, current_user_id, json_body
from ..core.exceptions import StorageError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _outcome_json(outcome):
        messages = [f.message for f in outcome.validation.findings]
        return jsonify(
            {
                "success": True,
                "entry_id": outcome.entry_id,
                "warnings": messages or None,
                "validation": outcome.validation.to_dict(),
            }
        )

    @app.route("/api/time-entries", methods=["POST"], endpoint="api_time_entry_create")
    @api_login_required
    def api_time_entry_create():
        try:
            data = json_body()
            outcome = container.time_entry_service.create(
                actor_id=current_user_id(),
                employee_id=data.get("employee_id", current_user_id()),
                work_date=parse_iso_date(data.get("work_date")),
                start=data.get("start"),
                end=data.get("end"),
                break_minutes=data.get("break_minutes", 0),
                site=data.get("site", ""),
                customer=data.get("customer", ""),
                notes=data.get("notes", ""),
                source_ip=client_ip(),
            )
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except StorageError:
            logger.exception("Saving time entry failed")
            return jsonify({"success": False, "message": "Error while saving"}), 500
        return _outcome_json(outcome)

    @app.route("/api/time-entries/<int:entry_id>", methods=["PUT"], endpoint="api_time_entry_update")
    @api_login_required
    def api_time_entry_update(entry_id: int):
        try:
            data = json_body()
            outcome = container.time_entry_service.update(
                actor_id=current_user_id(),
                entry_id=entry_id,
                work_date=parse_iso_date(data.get("work_date")),
                start=data.get("start"),
                end=data.get("end"),
                break_minutes=data.get("break_minutes", 0),
                site=data.get("site", ""),
                customer=data.get("customer", ""),
                notes=data.get("notes", ""),
                source_ip=client_ip(),
            )
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except StorageError:
            logger.exception("Updating time entry %s failed", entry_id)
            return jsonify({"success": False, "message": "Error while updating"}), 500
        return _outcome_json(outcome)

    @app.route("/api/time-entries/<int:entry_id>", methods=["DELETE"], endpoint="api_time_entry_delete")
    @api_login_required
    def api_time_entry_delete(entry_id: int):
        try:
            container.time_entry_service.delete(
                actor_id=current_user_id(), entry_id=entry_id, source_ip=client_ip()
            )
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except StorageError:
            logger.exception("Deleting time entry %s failed", entry_id)
            return jsonify({"success": False, "message": "Error while deleting"}), 500
        return jsonify({"success": True})

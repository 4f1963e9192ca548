"""Flask helpers shared by the controllers."""

from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Any, Optional

from flask import Flask, abort, jsonify, request, session

from ..access.permissions import visible_sections
from ..core.enums import Capability
from ..core.exceptions import (
    AuthenticationError,
    BusyError,
    SettlementIntegrityError,
    SyncError,
    ValidationError,
)
from ..reports.csv_export import CsvFile
from ..session.auth import Session
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

SESSION_KEY = "auth"


def current_session() -> Optional[Session]:
    data = session.get(SESSION_KEY)
    return Session.from_dict(data) if data else None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_session() is None:
            return jsonify({"success": False, "message": "Faça login para continuar"}), 401
        return view(*args, **kwargs)

    return wrapper


def capability_required(capability: Capability):
    """Routes outside the user's visible sections do not exist for them (404)."""

    def decorator(view):
        @wraps(view)
        @login_required
        def wrapper(*args, **kwargs):
            auth = current_session()
            if capability not in visible_sections(auth.role, auth.permissions):
                abort(404)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def json_body() -> dict[str, Any]:
    return request.get_json(silent=True) or {}


def arg_date(name: str, default: Optional[date] = None) -> Optional[date]:
    raw = request.args.get(name) or json_body().get(name)
    if not raw:
        return default
    try:
        return parse_iso_date(str(raw))
    except ValueError as exc:
        raise ValidationError(f"Data inválida: {name}") from exc


def arg_list(name: str) -> list[str]:
    values = request.args.getlist(name)
    if len(values) == 1 and "," in values[0]:
        values = values[0].split(",")
    return [v.strip() for v in values if v and v.strip()]


def csv_response(app: Flask, report: CsvFile):
    return app.response_class(
        report.content,
        mimetype=report.mimetype,
        headers={"Content-Disposition": f"attachment; filename={report.filename}"},
    )


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return jsonify({"success": False, "message": str(e)}), 400

    @app.errorhandler(AuthenticationError)
    def _authentication(e: AuthenticationError):
        return jsonify({"success": False, "message": str(e)}), 401

    @app.errorhandler(BusyError)
    def _busy(e: BusyError):
        return jsonify({"success": False, "message": str(e)}), 409

    @app.errorhandler(SettlementIntegrityError)
    def _integrity(e: SettlementIntegrityError):
        return (
            jsonify(
                {
                    "success": False,
                    "message": str(e),
                    "cashOutId": e.cash_out_id,
                    "failedRecordIds": e.failed_record_ids,
                }
            ),
            409,
        )

    @app.errorhandler(SyncError)
    def _sync(e: SyncError):
        logger.warning("request failed on store sync: %s", e)
        return jsonify({"success": False, "message": "Erro na sincronização. Tente novamente."}), 503

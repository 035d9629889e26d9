from __future__ import annotations

import logging

from flask import Flask, Response, jsonify, request, send_file
from werkzeug.exceptions import HTTPException

from dominium.errors import DominiumError, ValidationError
from dominium.google_sheets import SheetsClient
from dominium.services import CajaService
from dominium.settings import Settings

logger = logging.getLogger(__name__)


def _not_found() -> Response:
    return Response("Not found", status=404, mimetype="text/plain")


def _json_body() -> dict:
    # Empty body behaves like {}; anything unparseable is a client error.
    if not request.get_data(cache=True):
        return {}
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        raise ValidationError("JSON inválido")
    return data


def create_app(settings: Settings, sheets=None) -> Flask:
    sheets = sheets if sheets is not None else SheetsClient(settings)
    service = CajaService(sheets, settings)

    app = Flask(__name__, static_folder=None)

    def _ok(payload, status: int = 200):
        return jsonify(payload), status

    # --- Errors ---
    @app.errorhandler(404)
    @app.errorhandler(405)
    def not_found(_e):
        return _not_found()

    @app.errorhandler(DominiumError)
    def dominium_error(e: DominiumError):
        if e.status_code >= 500:
            logger.error(f"{request.method} {request.path}: {e.message}")
        return _ok({"ok": False, "error": e.message}, e.status_code)

    @app.errorhandler(Exception)
    def unexpected_error(e: Exception):
        if isinstance(e, HTTPException):
            return e
        logger.exception(f"Error inesperado en {request.method} {request.path}")
        return _ok({"ok": False, "error": str(e) or "error"}, 500)

    # --- Static UI ---
    @app.get("/", provide_automatic_options=False)
    @app.get("/index.html", provide_automatic_options=False)
    def index():
        p = settings.INDEX_HTML
        if not p.exists() or not p.is_file():
            return _not_found()
        return send_file(p, mimetype="text/html")

    @app.get("/favicon.ico", provide_automatic_options=False)
    def favicon():
        return Response(status=204)

    @app.get("/health", provide_automatic_options=False)
    def health():
        return _ok({"ok": True, "app": settings.APP_NAME})

    # --- JSON API ---
    @app.post("/api/add-product", provide_automatic_options=False)
    def api_add_product():
        data = _json_body()
        result = service.add_product(
            data.get("codigo"),
            data.get("nombre"),
            data.get("precio_sugerido_venta"),
            data.get("detalle", ""),
        )
        if result.already_exists:
            return _ok({"ok": True, "already_exists": True, "product": result.product.to_dict()})
        return _ok({"ok": True})

    @app.post("/api/add-to-caja", provide_automatic_options=False)
    def api_add_to_caja():
        data = _json_body()
        product = service.add_to_caja(data.get("codigo"))
        return _ok({"ok": True, "product": product.to_dict()})

    return app

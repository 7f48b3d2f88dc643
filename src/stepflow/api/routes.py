"""HTTP routes for the API server."""

from __future__ import annotations

import logging
from typing import Any, Dict

from flask import Flask, jsonify, request

from .. import __version__
from ..config.settings import Settings
from ..core.exceptions import (
    InvalidCommandError,
    PageNotFoundError,
    StepflowException,
)
from ..editing import apply_commands, command_from_dict
from ..flowchart import Flowchart, generate_flowchart
from ..pages import PageStore
from ..storage import build_document, parse_document, reconstruct_prompt

logger = logging.getLogger("stepflow.api")


def _payload() -> Dict[str, Any]:
    payload = request.get_json(force=True, silent=True)
    return payload if isinstance(payload, dict) else {}


def register_routes(app: Flask, *, settings: Settings, page_store: PageStore) -> None:
    @app.before_request
    def log_request() -> None:
        logger.info("HTTP %s %s from %s", request.method, request.path, request.remote_addr)

    @app.errorhandler(PageNotFoundError)
    def handle_page_not_found(exc: PageNotFoundError) -> Any:
        return jsonify({"error": exc.message}), 404

    @app.errorhandler(StepflowException)
    def handle_stepflow_error(exc: StepflowException) -> Any:
        logger.info("Request rejected: %s", exc)
        return jsonify({"error": exc.message, "context": exc.context or {}}), 400

    @app.get("/api/info")
    def api_info() -> Any:
        return jsonify(
            {
                "name": "stepflow",
                "version": __version__,
                "endpoints": {
                    "flowchart": "/api/flowchart",
                    "edit": "/api/flowchart/edit",
                    "pages": "/api/pages",
                    "document": "/api/document/export",
                },
            }
        )

    # ------------------------------------------------------------------
    # Flowcharts
    # ------------------------------------------------------------------

    @app.post("/api/flowchart")
    def create_flowchart() -> Any:
        payload = _payload()
        prompt = str(payload.get("prompt") or "")
        page_id = payload.get("page_id") or None
        flowchart = generate_flowchart(prompt, page_id=page_id, settings=settings)
        return jsonify(flowchart.to_dict())

    @app.post("/api/flowchart/edit")
    def edit_flowchart() -> Any:
        payload = _payload()
        raw_commands = payload.get("commands")
        if not isinstance(raw_commands, list):
            raise InvalidCommandError("'commands' must be a list")
        flowchart = Flowchart.from_dict(payload.get("flowchart") or {})
        commands = [command_from_dict(item) for item in raw_commands]
        return jsonify(apply_commands(flowchart, commands).to_dict())

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    @app.get("/api/pages")
    def list_pages() -> Any:
        return jsonify(
            {
                "active_page_id": page_store.active_page_id,
                "pages": [page.model_dump(mode="json") for page in page_store.list()],
            }
        )

    @app.post("/api/pages")
    def add_page() -> Any:
        payload = _payload()
        try:
            page = page_store.add_page(
                str(payload.get("name") or ""), template=payload.get("template") or None
            )
        except ValueError as exc:
            return jsonify({"error": str(exc)}), 400
        return jsonify(page.model_dump(mode="json")), 201

    @app.post("/api/pages/bulk")
    def bulk_pages() -> Any:
        pages = page_store.import_bulk(str(_payload().get("prompt") or ""))
        return jsonify({"pages": [page.model_dump(mode="json") for page in pages]}), 201

    @app.put("/api/pages/<page_id>/prompt")
    def set_page_prompt(page_id: str) -> Any:
        page = page_store.set_prompt(page_id, str(_payload().get("prompt") or ""))
        return jsonify(page.model_dump(mode="json"))

    @app.post("/api/pages/<page_id>/activate")
    def activate_page(page_id: str) -> Any:
        page = page_store.switch_to(page_id)
        return jsonify({"active_page_id": page.id})

    @app.delete("/api/pages/<page_id>")
    def delete_page(page_id: str) -> Any:
        if not page_store.delete(page_id):
            raise PageNotFoundError(f"Page not found: {page_id}")
        return jsonify({"deleted": page_id})

    @app.get("/api/pages/merged")
    def merged_pages() -> Any:
        return jsonify(page_store.merged().to_dict())

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    @app.post("/api/document/export")
    def export_document() -> Any:
        payload = _payload()
        flowchart = Flowchart.from_dict(payload.get("flowchart") or {})
        document = build_document(flowchart, str(payload.get("prompt") or ""), page_store.list())
        return jsonify(document.model_dump(mode="json"))

    @app.post("/api/document/reconstruct")
    def reconstruct() -> Any:
        document = parse_document(_payload().get("document") or {})
        return jsonify({"prompt": reconstruct_prompt(document.flowchart())})

"""HTTP entrypoint exposing the asset catalog as JSON."""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Optional, Tuple

from flask import Flask, current_app, jsonify, request
from werkzeug.exceptions import MethodNotAllowed, RequestEntityTooLarge

from catalog.core.config import Settings, get_settings
from catalog.core.errors import NotFoundError, ValidationError
from catalog.core.store import AssetStore
from catalog.etl.validate import LATITUDE_RANGE, LONGITUDE_RANGE, as_coordinate
from catalog.jobs.ingest import ingest_upload

logger = logging.getLogger(__name__)

STORE_EXTENSION = "asset_store"


def create_app(store: Optional[AssetStore] = None, settings: Optional[Settings] = None) -> Flask:
    """Build the Flask app around one explicitly owned store."""
    settings = settings or get_settings()
    if store is None:
        store = AssetStore.with_sample_data() if settings.seed_sample_data else AssetStore()

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = settings.max_upload_bytes
    app.extensions[STORE_EXTENSION] = store

    app.add_url_rule("/healthz", view_func=healthcheck, methods=["GET"])
    app.add_url_rule("/assets", view_func=list_assets, methods=["GET"])
    app.add_url_rule("/assets/upload", view_func=upload_assets, methods=["POST"])
    app.add_url_rule("/assets/delete", view_func=delete_asset, methods=["DELETE"])
    app.register_error_handler(MethodNotAllowed, method_not_allowed)
    app.register_error_handler(RequestEntityTooLarge, payload_too_large)
    return app


def _store() -> AssetStore:
    return current_app.extensions[STORE_EXTENSION]


# ---------- Routes ----------


def healthcheck() -> Any:
    store = _store()
    return jsonify({"status": "ok", "companies": len(store.companies()), "total": store.total_count()}), 200


def list_assets() -> Any:
    """GET /assets?companyId=... (case-insensitive substring filter)."""
    try:
        # Repeated companyId parameters are joined into one filter string.
        company_filter = ",".join(request.args.getlist("companyId")) or None
        assets = _store().list_assets(company_filter) or []
        return jsonify({"success": True, "assets": [a.to_dict() for a in assets], "total": len(assets)}), 200
    except Exception:  # noqa: BLE001
        logger.exception("Listing assets failed")
        return jsonify({"success": False, "assets": [], "total": 0, "error": "Internal server error"}), 500


def upload_assets() -> Any:
    """POST /assets/upload with multipart fields companyId and assetFile."""
    try:
        upload = request.files.get("assetFile")
        content: Optional[bytes] = None
        filename: Optional[str] = None
        mimetype: Optional[str] = None
        if upload is not None and upload.filename:
            filename = upload.filename
            mimetype = upload.mimetype
            content = upload.read()

        summary = ingest_upload(
            _store(),
            company_id=request.form.get("companyId"),
            filename=filename,
            content=content,
            mimetype=mimetype,
        )
    except RequestEntityTooLarge:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("Upload failed: %s", exc)
        return jsonify({"success": False, "message": "Internal server error", "error": str(exc)}), 500

    return jsonify(summary.to_dict()), 200 if summary.success else 400


def _read_delete_payload(payload: Dict[str, Any]) -> Tuple[str, float, float]:
    company_id = payload.get("companyId")
    if not isinstance(company_id, str) or not company_id.strip():
        raise ValidationError("companyId is required")

    latitude = as_coordinate(payload.get("latitude"))
    if latitude is None or math.isnan(latitude):
        raise ValidationError("latitude must be a valid number")
    longitude = as_coordinate(payload.get("longitude"))
    if longitude is None or math.isnan(longitude):
        raise ValidationError("longitude must be a valid number")

    if not LATITUDE_RANGE[0] <= latitude <= LATITUDE_RANGE[1]:
        raise ValidationError("latitude must be between -90 and 90")
    if not LONGITUDE_RANGE[0] <= longitude <= LONGITUDE_RANGE[1]:
        raise ValidationError("longitude must be between -180 and 180")
    return company_id, latitude, longitude


def delete_asset() -> Any:
    """DELETE /assets/delete with JSON body {companyId, latitude, longitude}."""
    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        payload = {}

    try:
        company_id, latitude, longitude = _read_delete_payload(payload)
        result = _store().delete_asset(company_id, latitude, longitude)
        if not result.success or result.deleted_asset is None:
            raise NotFoundError(
                f"No asset found at coordinates ({latitude}, {longitude}) for company {company_id}"
            )
    except (ValidationError, NotFoundError) as exc:
        return jsonify({"success": False, "message": exc.message, "error": exc.error}), exc.status_code
    except Exception as exc:  # noqa: BLE001
        logger.exception("Delete failed: %s", exc)
        return jsonify({"success": False, "message": "Internal server error", "error": str(exc)}), 500

    address = result.deleted_asset.address
    return (
        jsonify(
            {
                "success": True,
                "message": f'Asset "{address}" deleted successfully from company {company_id}',
                "deletedAsset": {"address": address, "companyId": company_id},
            }
        ),
        200,
    )


# ---------- Error handlers ----------

_ALLOWED_METHODS = {"/assets/upload": "POST", "/assets/delete": "DELETE"}


def method_not_allowed(exc: MethodNotAllowed) -> Any:
    allowed = _ALLOWED_METHODS.get(request.path)
    if allowed is None:
        body = {"success": False, "assets": [], "total": 0, "error": "Method not allowed"}
    else:
        body = {
            "success": False,
            "message": "Method not allowed",
            "error": f"Only {allowed} method is supported",
        }
    response = jsonify(body)
    response.headers["Allow"] = ", ".join(exc.valid_methods or [])
    return response, 405


def payload_too_large(exc: RequestEntityTooLarge) -> Any:
    limit = current_app.config.get("MAX_CONTENT_LENGTH")
    logger.warning("Rejected upload larger than %s bytes", limit)
    return (
        jsonify(
            {
                "success": False,
                "message": "File too large",
                "error": f"Upload exceeds the maximum allowed size of {limit} bytes",
            }
        ),
        413,
    )


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    app = create_app(settings=settings)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", settings.port)
    app.run(host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()

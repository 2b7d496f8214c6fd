"""
API Blueprint - PDF upload route

POST /api/upload either relays the PDF to the external processor (proxy mode)
or stores it under UPLOAD_DIR (local mode). GET /api/upload is a liveness probe.
"""
import io
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, request, send_file
from werkzeug.exceptions import RequestEntityTooLarge

from pdfdrop.services.pdf_service import PDF_MIME, is_pdf_mimetype
from pdfdrop.services.processor_service import ProcessorError, forward_pdf
from pdfdrop.services.storage_service import store_upload

api_bp = Blueprint('api', __name__)


def now_utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _proxy_response(data: bytes, filename: str):
    cfg = current_app.config
    try:
        result = forward_pdf(data, filename, cfg["PROCESSOR_URL"], timeout=cfg["PROCESSOR_TIMEOUT"])
        current_app.logger.info("Processor response for %s: %s", filename, result)
        status = "ok"
    except ProcessorError as e:
        current_app.logger.warning("Processor call failed for %s: %s", filename, e)
        status = "error"

    resp = send_file(
        io.BytesIO(data),
        mimetype=PDF_MIME,
        as_attachment=False,
        download_name=filename,
    )
    resp.headers["X-Processor-Status"] = status
    return resp


def _local_response(data: bytes, filename: str):
    stored = store_upload(data, filename, current_app.config["UPLOAD_DIR"])
    current_app.logger.info("Stored %s as %s (%d bytes)", filename, stored.path, stored.size)
    return jsonify(stored.to_dict()), 200


@api_bp.route("/upload", methods=["POST"])
def upload():
    try:
        file = request.files.get("file")
        if not file or not (file.filename or "").strip():
            current_app.logger.info("Upload rejected: no file")
            return jsonify({"error": "No file provided"}), 400

        filename = file.filename
        if not is_pdf_mimetype(file.mimetype):
            current_app.logger.info("Upload rejected: %s is %s, not a PDF", filename, file.mimetype)
            return jsonify({"error": "Only PDF files are accepted"}), 400

        data = file.read()
        current_app.logger.info("Received file: name=%s size=%d type=%s", filename, len(data), file.mimetype)

        if current_app.config["UPLOAD_MODE"] == "proxy":
            return _proxy_response(data, filename)
        return _local_response(data, filename)
    except RequestEntityTooLarge:
        raise
    except Exception:
        current_app.logger.exception("Upload failed")
        return jsonify({"error": "Failed to process file"}), 500


@api_bp.route("/upload", methods=["GET"])
def upload_status():
    return jsonify({
        "message": "PDF Upload API is working",
        "timestamp": now_utc_iso(),
    })


@api_bp.errorhandler(RequestEntityTooLarge)
def too_large(e):
    limit = current_app.config.get("MAX_CONTENT_LENGTH")
    return jsonify({"error": f"File too large. Max allowed is {limit} bytes."}), 413

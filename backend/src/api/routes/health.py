"""
Theme Park Wait Times - Health Check Endpoints
Reports the ingestion loop's last success, last error and polling interval.
"""

import time

from flask import Blueprint, current_app, jsonify

from scheduler.liveness import is_healthy

health_bp = Blueprint('health', __name__)


@health_bp.route('/health', methods=['GET'])
def health_check():
    """
    Health check endpoint.

    Response:
        200 OK: {"ok": true, "status": {...}} when a run has succeeded or no error is set
        500 Internal Server Error: {"ok": false, "status": {...}} otherwise
    """
    reporter = current_app.config['LIVENESS_REPORTER']
    status = reporter.get_status()
    ok = is_healthy(status)

    return jsonify({"ok": ok, "status": status}), 200 if ok else 500


@health_bp.route('/', methods=['GET'])
def index():
    """Root endpoint with process uptime in seconds."""
    uptime = time.monotonic() - current_app.config['STARTED_AT']
    return jsonify({"uptime": round(uptime, 3)}), 200

"""
Theme Park Wait Times - Health API Application
Small Flask app exposing the ingestion loop's liveness.
"""

import time
from typing import Optional

from flask import Flask
from flask_cors import CORS

from api.routes.health import health_bp
from api.middleware.error_handler import register_error_handlers
from scheduler.liveness import LivenessReporter
from utils.logger import logger


def create_app(liveness: LivenessReporter, started_at: Optional[float] = None) -> Flask:
    """
    Create and configure Flask application.

    Args:
        liveness: Reporter for the scheduler's in-memory state
        started_at: time.monotonic() reading used as uptime origin (defaults to now)

    Returns:
        Configured Flask app instance
    """
    app = Flask(__name__)

    app.json.sort_keys = False  # Preserve JSON key order
    app.config['LIVENESS_REPORTER'] = liveness
    app.config['STARTED_AT'] = time.monotonic() if started_at is None else started_at

    # Dashboards may poll the health endpoint from the browser
    CORS(app, resources={
        r"/health": {
            "origins": "*",
            "methods": ["GET", "OPTIONS"]
        }
    })

    app.register_blueprint(health_bp)
    register_error_handlers(app)

    logger.info("Health app created")
    return app

"""
Theme Park Wait Times - Error Handler Middleware
JSON error responses for the health API.
"""

from flask import jsonify, Flask
from werkzeug.exceptions import HTTPException

from utils.logger import logger


def register_error_handlers(app: Flask):
    """
    Register error handlers for Flask app.

    Args:
        app: Flask application instance
    """

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 Not Found errors."""
        logger.info(f"Not found: {error}")
        return jsonify({
            "error": "Not Found",
            "message": "The requested resource was not found"
        }), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        """Handle 405 Method Not Allowed errors."""
        return jsonify({
            "error": "Method Not Allowed",
            "message": "The method is not allowed for the requested URL"
        }), 405

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        """Handle all unhandled exceptions."""
        # If it's an HTTP exception, pass through to specific handler
        if isinstance(error, HTTPException):
            return error

        logger.error(f"Unexpected error: {error}", exc_info=True)

        return jsonify({
            "error": "Internal Server Error",
            "message": "An unexpected error occurred. Please try again later."
        }), 500

    logger.info("Error handlers registered")

"""
Health controller - health check endpoint for monitoring.
"""

from flask import Blueprint, jsonify

from petbkk import __version__
from petbkk.container import get_container
from petbkk.core.exceptions import StorageError
from petbkk.core.logging_config import get_logger

logger = get_logger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/api")


@health_bp.route("/health", methods=["GET"])
def health_check():
    """
    Report process health and whether the storage adapter answers.

    Returns 200 with status "healthy", or 503 with status "degraded" when
    the catalog cannot be read from storage.
    """
    repositories = get_container().repositories
    payload = {"version": __version__, "storage": repositories.backend}

    try:
        payload["providers"] = len(repositories.providers.get_all())
    except StorageError as e:
        logger.error(
            "Health check: storage unavailable",
            extra={"context": {"backend": repositories.backend, "error": str(e)}},
        )
        payload["status"] = "degraded"
        return jsonify(payload), 503

    payload["status"] = "healthy"
    return jsonify(payload), 200

import os
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from petbkk.core import config
from petbkk.core.exceptions import (
    InvalidStateError,
    NotAuthenticatedError,
    NotFoundError,
    PetBkkError,
    SlotUnavailableError,
    StorageError,
    ValidationError,
)
from petbkk.core.logging_config import get_logger, setup_logging
from petbkk.repositories.factory import RepositoryBundle

logger = get_logger(__name__)

# Most specific first: SlotUnavailableError is also a ValidationError
ERROR_STATUS_CODES = (
    (SlotUnavailableError, 409),
    (ValidationError, 400),
    (NotAuthenticatedError, 401),
    (NotFoundError, 404),
    (InvalidStateError, 409),
    (StorageError, 503),
)


def status_code_for(error: PetBkkError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return 500


def register_error_handlers(app: Flask) -> None:
    from petbkk.schemas.dtos import ErrorResponse

    @app.errorhandler(PetBkkError)
    def handle_core_error(error: PetBkkError):
        status_code = status_code_for(error)
        log = logger.error if status_code >= 500 else logger.info
        log(
            "Request failed",
            extra={
                "context": {
                    "error": error.error_code,
                    "message": error.message,
                    "status_code": status_code,
                }
            },
        )
        return jsonify(ErrorResponse.from_exception(error).to_dict()), status_code

    @app.errorhandler(404)
    def handle_not_found(_error):
        return jsonify(ErrorResponse.not_found("Resource").to_dict()), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(_error):
        return (
            jsonify(
                ErrorResponse(
                    error="method_not_allowed", message="Method not allowed"
                ).to_dict()
            ),
            405,
        )

    @app.errorhandler(500)
    def handle_server_error(_error):
        return jsonify(ErrorResponse.server_error().to_dict()), 500


def create_app(
    test_config: Optional[Dict[str, Any]] = None,
    repositories: Optional[RepositoryBundle] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> Flask:
    """Application factory.

    Args:
        test_config: Flask config overrides
        repositories: prebuilt repository bundle; built from
            PETBKK_STORAGE when omitted
        clock: market-time clock used for "today" decisions
    """
    if not os.getenv("PETBKK_SKIP_DOTENV"):
        load_dotenv()

    app = Flask(__name__)
    app.config.update(
        SECRET_KEY=config.get_secret_key(),
        JSON_SORT_KEYS=False,
        TRUST_PROFILE_HEADER=config.get_trust_profile_header(),
    )
    if test_config:
        app.config.update(test_config)

    setup_logging(
        app=app,
        log_level=config.get_log_level(),
        enable_sql_echo=config.get_sql_echo(),
        log_to_file=config.get_log_to_file(),
        use_json_format=config.get_log_json(),
    )
    config.log_booking_config()

    from petbkk.container import EXTENSION_KEY, ServiceContainer
    from petbkk.controllers.auth_controller import auth_bp, profile_bp
    from petbkk.controllers.booking_controller import booking_bp
    from petbkk.controllers.catalog_controller import catalog_bp
    from petbkk.controllers.health_controller import health_bp
    from petbkk.controllers.pet_controller import pet_bp
    from petbkk.core.auth import init_auth
    from petbkk.repositories.factory import create_repositories

    if repositories is None:
        config.log_storage_config()
        repositories = create_repositories()

    app.extensions[EXTENSION_KEY] = ServiceContainer(
        repositories, clock=clock or config.market_now
    )

    init_auth(app)
    register_error_handlers(app)

    app.register_blueprint(auth_bp)
    app.register_blueprint(profile_bp)
    app.register_blueprint(pet_bp)
    app.register_blueprint(booking_bp)
    app.register_blueprint(catalog_bp)
    app.register_blueprint(health_bp)

    logger.info(
        "Application created",
        extra={"context": {"storage": repositories.backend}},
    )
    return app


if __name__ == "__main__":
    create_app().run(debug=os.getenv("FLASK_ENV") == "development")

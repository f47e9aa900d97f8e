"""
Authentication glue between Flask-Login and the profile service.

A signed-in profile is kept in the Flask session. When TRUST_PROFILE_HEADER
is on, a gateway that authenticated the caller elsewhere (the OTP provider)
may instead pass the profile id in the ``X-Profile-Id`` header.
"""

from typing import Optional

from flask import current_app, jsonify
from flask_login import LoginManager, UserMixin, current_user

from petbkk.core.exceptions import NotAuthenticatedError
from petbkk.core.logging_config import get_logger
from petbkk.domain.entities import Profile

logger = get_logger(__name__)

PROFILE_HEADER = "X-Profile-Id"

login_manager = LoginManager()


class AuthenticatedProfile(UserMixin):
    """Flask-Login user wrapping a domain Profile."""

    def __init__(self, profile: Profile):
        self.profile = profile
        self.id = profile.id

    def get_id(self):
        return str(self.id)


def _load_profile(profile_id: Optional[str]) -> Optional[AuthenticatedProfile]:
    from petbkk.container import get_container

    if not profile_id:
        return None
    profile = get_container().repositories.profiles.get(profile_id)
    return AuthenticatedProfile(profile) if profile else None


def init_auth(app) -> None:
    login_manager.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        return _load_profile(user_id)

    @login_manager.request_loader
    def load_user_from_request(request):
        """Load the profile named by the X-Profile-Id header.

        Ignored unless the app sets TRUST_PROFILE_HEADER.
        """
        profile_id = request.headers.get(PROFILE_HEADER, "").strip()
        if not profile_id:
            return None
        if not current_app.config.get("TRUST_PROFILE_HEADER"):
            logger.debug("Ignoring untrusted profile header")
            return None

        user = _load_profile(profile_id)
        if not user:
            logger.warning(
                "Unknown profile in request header",
                extra={"context": {"profile_id": profile_id}},
            )
        return user

    @login_manager.unauthorized_handler
    def unauthorized():
        """Return 401 JSON instead of redirecting to a login page."""
        from petbkk.schemas.dtos import ErrorResponse

        return jsonify(ErrorResponse.from_exception(NotAuthenticatedError()).to_dict()), 401


def current_profile_id() -> Optional[str]:
    """Id of the authenticated profile, or None for anonymous requests."""
    if current_user and current_user.is_authenticated:
        return current_user.get_id()
    return None

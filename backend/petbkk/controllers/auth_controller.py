"""
Auth and profile controller.

This controller:
- Handles HTTP concerns only (Single Responsibility)
- Depends on service abstractions (Dependency Inversion)
"""

from flask import Blueprint
from flask_login import login_required, login_user, logout_user

from petbkk.container import get_container
from petbkk.core.api_utils import api_response, json_body
from petbkk.core.auth import AuthenticatedProfile, current_profile_id
from petbkk.core.exceptions import NotFoundError
from petbkk.core.logging_config import get_logger
from petbkk.schemas.dtos import ProfileResponse, ProfileUpdateRequest

logger = get_logger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")
profile_bp = Blueprint("profile", __name__, url_prefix="/api/profile")


@auth_bp.route("/sign-in", methods=["POST"])
def sign_in():
    """Start a session for a phone number already verified by OTP."""
    data = json_body()
    profile = get_container().profiles.sign_in(data.get("phone"))
    login_user(AuthenticatedProfile(profile))

    logger.info("Profile signed in", extra={"context": {"profile_id": profile.id}})
    return api_response(True, "Signed in", ProfileResponse.from_domain(profile).to_dict())


@auth_bp.route("/sign-out", methods=["POST"])
def sign_out():
    logout_user()
    return api_response(True, "Signed out")


@profile_bp.route("", methods=["GET"])
@login_required
def get_profile():
    profile = get_container().profiles.get_profile(current_profile_id())
    if not profile:
        raise NotFoundError("Profile", current_profile_id())
    return api_response(True, "Profile", ProfileResponse.from_domain(profile).to_dict())


@profile_bp.route("", methods=["PATCH"])
@login_required
def update_profile():
    request_dto = ProfileUpdateRequest.from_dict(json_body())
    profile = get_container().profiles.update_profile(current_profile_id(), request_dto)
    if not profile:
        raise NotFoundError("Profile", current_profile_id())
    return api_response(
        True, "Profile updated", ProfileResponse.from_domain(profile).to_dict()
    )


@profile_bp.route("/stats", methods=["GET"])
@login_required
def profile_stats():
    stats = get_container().profiles.get_stats(current_profile_id())
    return api_response(True, "Profile stats", stats)

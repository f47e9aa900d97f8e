"""
Booking controller for handling HTTP requests following SOLID principles.

This controller:
- Handles HTTP concerns only (Single Responsibility)
- Depends on service abstractions (Dependency Inversion)
- Leaves every booking rule to BookingService
"""

from flask import Blueprint, request
from flask_login import login_required

from petbkk.container import get_container
from petbkk.core.api_utils import api_response, json_body
from petbkk.core.auth import current_profile_id
from petbkk.core.exceptions import NotFoundError
from petbkk.schemas.dtos import BookingCreateRequest, BookingResponse

booking_bp = Blueprint("bookings", __name__, url_prefix="/api/bookings")


@booking_bp.route("", methods=["GET"])
@login_required
def list_bookings():
    """List bookings; ?filter=upcoming|past|all (default all)."""
    list_filter = request.args.get("filter", "all")
    bookings = get_container().bookings.list_bookings(current_profile_id(), list_filter)
    return api_response(
        True, "Bookings", [BookingResponse.from_domain(b).to_dict() for b in bookings]
    )


@booking_bp.route("", methods=["POST"])
@login_required
def create_booking():
    request_dto = BookingCreateRequest.from_dict(json_body())
    booking = get_container().bookings.create_booking(current_profile_id(), request_dto)
    return api_response(
        True, "Booking created", BookingResponse.from_domain(booking).to_dict(), 201
    )


@booking_bp.route("/<booking_id>", methods=["GET"])
@login_required
def get_booking(booking_id: str):
    booking = get_container().bookings.get_booking(booking_id, current_profile_id())
    if not booking:
        raise NotFoundError("Booking", booking_id)
    return api_response(True, "Booking", BookingResponse.from_domain(booking).to_dict())


@booking_bp.route("/<booking_id>/cancel", methods=["POST"])
@login_required
def cancel_booking(booking_id: str):
    booking = get_container().bookings.cancel_booking(booking_id, current_profile_id())
    if not booking:
        raise NotFoundError("Booking", booking_id)
    return api_response(
        True, "Booking cancelled", BookingResponse.from_domain(booking).to_dict()
    )

"""
Catalog controller: public, read-only provider and service endpoints.
"""

from flask import Blueprint, request

from petbkk.container import get_container
from petbkk.core.api_utils import api_response
from petbkk.core.exceptions import NotFoundError, ValidationError
from petbkk.schemas.dtos import ProviderResponse, ServiceResponse, parse_iso_date

catalog_bp = Blueprint("catalog", __name__, url_prefix="/api/providers")


@catalog_bp.route("", methods=["GET"])
def list_providers():
    """List providers; ?type=<business_type>|all and ?q=<name or district>."""
    providers = get_container().catalog.list_providers(
        type_filter=request.args.get("type"),
        search_text=request.args.get("q"),
    )
    return api_response(
        True, "Providers", [ProviderResponse.from_domain(p).to_dict() for p in providers]
    )


@catalog_bp.route("/<provider_id>", methods=["GET"])
def get_provider(provider_id: str):
    provider = get_container().catalog.get_provider(provider_id)
    if not provider:
        raise NotFoundError("Provider", provider_id)
    return api_response(True, "Provider", ProviderResponse.from_domain(provider).to_dict())


@catalog_bp.route("/<provider_id>/services", methods=["GET"])
def list_services(provider_id: str):
    catalog = get_container().catalog
    if not catalog.get_provider(provider_id):
        raise NotFoundError("Provider", provider_id)
    services = catalog.list_services(provider_id)
    return api_response(
        True, "Services", [ServiceResponse.from_domain(s).to_dict() for s in services]
    )


@catalog_bp.route("/<provider_id>/slots", methods=["GET"])
def available_slots(provider_id: str):
    """Bookable times for ?date=YYYY-MM-DD (optionally &service_id=)."""
    booking_date = parse_iso_date("date", request.args.get("date"))
    if booking_date is None:
        raise ValidationError("date", "date is required")

    slots = get_container().catalog.available_slots(
        provider_id, booking_date, request.args.get("service_id")
    )
    if slots is None:
        raise NotFoundError("Provider", provider_id)
    return api_response(
        True,
        "Available slots",
        {"date": booking_date.isoformat(), "slots": slots},
    )

"""
Pet controller for the signed-in profile's pets.
"""

from flask import Blueprint
from flask_login import login_required

from petbkk.container import get_container
from petbkk.core.api_utils import api_response, json_body
from petbkk.core.auth import current_profile_id
from petbkk.core.exceptions import NotFoundError
from petbkk.schemas.dtos import PetCreateRequest, PetResponse, PetUpdateRequest

pet_bp = Blueprint("pets", __name__, url_prefix="/api/pets")


@pet_bp.route("", methods=["GET"])
@login_required
def list_pets():
    """List the profile's pets, newest first."""
    pets = get_container().pets.list_pets(current_profile_id())
    return api_response(
        True, "Pets", [PetResponse.from_domain(p).to_dict() for p in pets]
    )


@pet_bp.route("", methods=["POST"])
@login_required
def add_pet():
    request_dto = PetCreateRequest.from_dict(json_body())
    pet = get_container().pets.add_pet(current_profile_id(), request_dto)
    return api_response(True, "Pet added", PetResponse.from_domain(pet).to_dict(), 201)


@pet_bp.route("/<pet_id>", methods=["GET"])
@login_required
def get_pet(pet_id: str):
    pet = get_container().pets.get_pet(pet_id, current_profile_id())
    if not pet:
        raise NotFoundError("Pet", pet_id)
    return api_response(True, "Pet", PetResponse.from_domain(pet).to_dict())


@pet_bp.route("/<pet_id>", methods=["PATCH"])
@login_required
def update_pet(pet_id: str):
    request_dto = PetUpdateRequest.from_dict(json_body())
    pet = get_container().pets.update_pet(pet_id, current_profile_id(), request_dto)
    if not pet:
        raise NotFoundError("Pet", pet_id)
    return api_response(True, "Pet updated", PetResponse.from_domain(pet).to_dict())


@pet_bp.route("/<pet_id>", methods=["DELETE"])
@login_required
def delete_pet(pet_id: str):
    if not get_container().pets.delete_pet(pet_id, current_profile_id()):
        raise NotFoundError("Pet", pet_id)
    return api_response(True, "Pet removed")

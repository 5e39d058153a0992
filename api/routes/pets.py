# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Pet endpoints: list, recent widget, create, read, update and delete.
"""

from flask import jsonify, current_app
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
import logging
from typing import Dict, Any

from models.entities import Pet
from models.requests import CreatePetRequest, UpdatePetRequest, PetPath
from models.responses import PetResponse
from middleware.auth import require_jwt
from middleware.error_handler import NotFoundException
from utils.request import current_user, current_backend, get_request_context

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

RECENT_PETS_LIMIT = 3
PET_NOT_FOUND = "Pet não encontrado"

pets_tag = Tag(name="Pets", description="Pets owned by the signed-in user")
pets_bp = APIBlueprint(
    'pets',
    __name__,
    url_prefix='/api/pets',
    abp_tags=[pets_tag]
)


def pet_resource(row: Dict[str, Any]) -> Dict[str, Any]:
    """Parse a backend row and format it as a HAL resource."""
    pet = Pet.model_validate(row)
    return current_app.hal_formatter.format_pet(pet.model_dump(mode='json', exclude={'user_id'}))


def _list_pets(limit=None):
    user = current_user()
    rows = current_backend().select(
        "pets",
        user.access_token,
        order_by="created_at",
        descending=True,
        limit=limit
    )
    return [pet_resource(row) for row in rows]


@pets_bp.get('')
@require_jwt
def list_pets():
    """
    List the user's pets, newest first.
    """
    with tracer.start_as_current_span("pet.list") as span:
        pets = _list_pets()
        span.set_attribute("pet.count", len(pets))
        return jsonify(current_app.hal_formatter.format_collection("pets", pets, "/api/pets")), 200


@pets_bp.get('/recent')
@require_jwt
def recent_pets():
    """Three most recently added pets, for the dashboard."""
    with tracer.start_as_current_span("pet.recent"):
        pets = _list_pets(limit=RECENT_PETS_LIMIT)
        return jsonify(current_app.hal_formatter.format_collection("pets", pets, "/api/pets/recent")), 200


@pets_bp.post('', responses={201: PetResponse})
@require_jwt
def create_pet(body: CreatePetRequest):
    """
    Add a pet.

    The name must contain only letters and spaces (up to 50 characters);
    species is ``cachorro`` or ``gato``.
    """
    user = current_user()

    with tracer.start_as_current_span("pet.create", attributes={"user.id": user.user_id}) as span:
        record = body.to_record()
        record["user_id"] = user.user_id

        row = current_backend().insert("pets", user.access_token, record)

        span.set_attribute("pet.id", row["id"])
        span.set_status(Status(StatusCode.OK))
        logger.info(
            "Pet created",
            extra={**get_request_context(), "pet_id": row["id"], "species": record["species"]}
        )
        return jsonify(pet_resource(row)), 201


@pets_bp.get('/<pet_id>', responses={200: PetResponse})
@require_jwt
def get_pet(path: PetPath):
    """Read one pet."""
    with tracer.start_as_current_span("pet.get", attributes={"pet.id": path.pet_id}):
        row = current_backend().select_one("pets", current_user().access_token, path.pet_id)
        if row is None:
            raise NotFoundException(PET_NOT_FOUND)
        return jsonify(pet_resource(row)), 200


@pets_bp.put('/<pet_id>', responses={200: PetResponse})
@require_jwt
def update_pet(path: PetPath, body: UpdatePetRequest):
    """
    Edit a pet. Fields left out of the body are not changed.
    """
    user = current_user()

    with tracer.start_as_current_span("pet.update", attributes={"pet.id": path.pet_id}) as span:
        changes = body.to_record()
        span.set_attribute("pet.changed_fields", ",".join(sorted(changes)))

        if changes:
            row = current_backend().update("pets", user.access_token, path.pet_id, changes)
        else:
            row = current_backend().select_one("pets", user.access_token, path.pet_id)

        if row is None:
            raise NotFoundException(PET_NOT_FOUND)

        logger.info("Pet updated", extra={**get_request_context(), "pet_id": path.pet_id})
        return jsonify(pet_resource(row)), 200


@pets_bp.delete('/<pet_id>')
@require_jwt
def delete_pet(path: PetPath):
    """Delete a pet. Its vaccines are removed by the backend's cascade."""
    with tracer.start_as_current_span("pet.delete", attributes={"pet.id": path.pet_id}):
        if not current_backend().delete("pets", current_user().access_token, path.pet_id):
            raise NotFoundException(PET_NOT_FOUND)

        logger.info("Pet deleted", extra={**get_request_context(), "pet_id": path.pet_id})
        return '', 204

# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Vaccine endpoints.

The list carries the four-state due status of each dose (overdue, urgent,
upcoming, up to date); the stats endpoint uses the two-threshold aggregate
classification.
"""

from datetime import date, timedelta
from flask import jsonify, current_app
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
import logging
from typing import Dict, Any

from domain import vaccines as vaccine_domain
from models.entities import PetSummary, Vaccine, parse_next_dose_dates
from models.requests import CreateVaccineRequest, UpdateVaccineRequest, VaccinePath
from models.responses import VaccineResponse, VaccineStatsResponse
from middleware.auth import require_jwt
from middleware.error_handler import NotFoundException
from utils.request import current_user, current_backend, today, get_request_context

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

VACCINE_COLUMNS = "*, pets:pet_id (name, species)"
UPCOMING_COLUMNS = "id, pet_id, name, application_date, next_dose_date, pets:pet_id (name, species)"
VACCINE_NOT_FOUND = "Vacina não encontrada"
PET_NOT_FOUND = "Pet não encontrado"

vaccines_tag = Tag(name="Vaccines", description="Vaccination history and due dates")
vaccines_bp = APIBlueprint(
    'vaccines',
    __name__,
    url_prefix='/api/vaccines',
    abp_tags=[vaccines_tag]
)


def vaccine_resource(row: Dict[str, Any], as_of: date) -> Dict[str, Any]:
    """Parse a backend row, attach its due status and format it as a HAL resource."""
    vaccine = Vaccine.model_validate(row)
    status = vaccine_domain.classify_due_date(vaccine.next_dose_date, as_of)

    data = vaccine.model_dump(mode='json')
    data["status"] = status.value
    data["status_label"] = vaccine_domain.status_label(status)
    return current_app.hal_formatter.format_vaccine(data)


def _require_pet(pet_id: str, access_token: str):
    if current_backend().select_one("pets", access_token, pet_id, columns="id") is None:
        raise NotFoundException(PET_NOT_FOUND)


@vaccines_bp.get('')
@require_jwt
def list_vaccines():
    """
    List every vaccine of the user's pets, latest application first.
    """
    with tracer.start_as_current_span("vaccine.list") as span:
        rows = current_backend().select(
            "vaccines",
            current_user().access_token,
            columns=VACCINE_COLUMNS,
            order_by="application_date",
            descending=True
        )
        as_of = today()
        vaccines = [vaccine_resource(row, as_of) for row in rows]

        span.set_attribute("vaccine.count", len(vaccines))
        return jsonify(current_app.hal_formatter.format_collection("vaccines", vaccines, "/api/vaccines")), 200


@vaccines_bp.get('/upcoming')
@require_jwt
def upcoming_vaccines():
    """
    Doses due within the next 30 days, overdue ones included, earliest first.
    """
    with tracer.start_as_current_span("vaccine.upcoming") as span:
        as_of = today()
        horizon = vaccine_domain.to_calendar_date(as_of) + timedelta(
            days=vaccine_domain.UPCOMING_WINDOW_DAYS
        )
        rows = current_backend().select(
            "vaccines",
            current_user().access_token,
            columns=UPCOMING_COLUMNS,
            filters=[("not_is", "next_dose_date", "null"), ("lte", "next_dose_date", horizon.isoformat())],
            order_by="next_dose_date"
        )

        vaccines = [Vaccine.model_validate(row) for row in rows]
        items = []
        for vaccine in vaccine_domain.select_upcoming(vaccines, as_of):
            status = vaccine_domain.classify_due_date(vaccine.next_dose_date, as_of)
            pet = vaccine.pet or PetSummary()
            items.append(current_app.hal_formatter.format_vaccine({
                "id": vaccine.id,
                "pet_id": vaccine.pet_id,
                "name": vaccine.name,
                "next_dose_date": vaccine.next_dose_date.isoformat(),
                "status": status.value,
                "status_label": vaccine_domain.status_label(status),
                "pet": pet.model_dump(mode='json')
            }))

        span.set_attribute("vaccine.count", len(items))
        return jsonify(current_app.hal_formatter.format_collection(
            "vaccines", items, "/api/vaccines/upcoming"
        )), 200


@vaccines_bp.get('/stats', responses={200: VaccineStatsResponse})
@require_jwt
def vaccine_stats():
    """
    Counts of doses by aggregate status.

    Doses without a next dose date count as up to date.
    """
    with tracer.start_as_current_span("vaccine.stats"):
        rows = current_backend().select("vaccines", current_user().access_token, columns="next_dose_date")
        stats = vaccine_domain.compute_vaccine_stats(
            parse_next_dose_dates(rows),
            today()
        )
        return jsonify(stats.to_dict()), 200


@vaccines_bp.post('', responses={201: VaccineResponse})
@require_jwt
def create_vaccine(body: CreateVaccineRequest):
    """
    Record a vaccine dose for one of the user's pets.
    """
    user = current_user()

    with tracer.start_as_current_span("vaccine.create", attributes={"pet.id": body.pet_id}) as span:
        _require_pet(body.pet_id, user.access_token)

        backend = current_backend()
        row = backend.insert("vaccines", user.access_token, body.to_record())
        row = backend.select_one("vaccines", user.access_token, row["id"], columns=VACCINE_COLUMNS) or row

        span.set_attribute("vaccine.id", row["id"])
        span.set_status(Status(StatusCode.OK))
        logger.info(
            "Vaccine recorded",
            extra={**get_request_context(), "vaccine_id": row["id"], "pet_id": body.pet_id}
        )
        return jsonify(vaccine_resource(row, today())), 201


@vaccines_bp.get('/<vaccine_id>', responses={200: VaccineResponse})
@require_jwt
def get_vaccine(path: VaccinePath):
    """Read one vaccine dose."""
    with tracer.start_as_current_span("vaccine.get", attributes={"vaccine.id": path.vaccine_id}):
        row = current_backend().select_one(
            "vaccines", current_user().access_token, path.vaccine_id, columns=VACCINE_COLUMNS
        )
        if row is None:
            raise NotFoundException(VACCINE_NOT_FOUND)
        return jsonify(vaccine_resource(row, today())), 200


@vaccines_bp.put('/<vaccine_id>', responses={200: VaccineResponse})
@require_jwt
def update_vaccine(path: VaccinePath, body: UpdateVaccineRequest):
    """
    Edit a vaccine dose. Fields left out of the body are not changed;
    an empty next dose date clears it.
    """
    user = current_user()

    with tracer.start_as_current_span("vaccine.update", attributes={"vaccine.id": path.vaccine_id}) as span:
        changes = body.to_record()
        span.set_attribute("vaccine.changed_fields", ",".join(sorted(changes)))

        backend = current_backend()
        if "pet_id" in changes:
            _require_pet(changes["pet_id"], user.access_token)

        if changes and backend.update("vaccines", user.access_token, path.vaccine_id, changes) is None:
            raise NotFoundException(VACCINE_NOT_FOUND)

        row = backend.select_one("vaccines", user.access_token, path.vaccine_id, columns=VACCINE_COLUMNS)
        if row is None:
            raise NotFoundException(VACCINE_NOT_FOUND)

        logger.info("Vaccine updated", extra={**get_request_context(), "vaccine_id": path.vaccine_id})
        return jsonify(vaccine_resource(row, today())), 200


@vaccines_bp.delete('/<vaccine_id>')
@require_jwt
def delete_vaccine(path: VaccinePath):
    """Delete a vaccine dose."""
    with tracer.start_as_current_span("vaccine.delete", attributes={"vaccine.id": path.vaccine_id}):
        if not current_backend().delete("vaccines", current_user().access_token, path.vaccine_id):
            raise NotFoundException(VACCINE_NOT_FOUND)

        logger.info("Vaccine deleted", extra={**get_request_context(), "vaccine_id": path.vaccine_id})
        return '', 204

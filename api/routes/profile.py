# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Profile endpoints for the signed-in account holder.
"""

from flask import jsonify, current_app
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
import logging
from typing import Dict, Any, Optional

from domain.validation import format_phone
from models.entities import Profile, UserContext
from models.requests import UpdateProfileRequest
from models.responses import ProfileResponse
from middleware.auth import require_jwt
from middleware.error_handler import NotFoundException
from utils.request import current_user, current_backend, get_request_context

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

PROFILE_NOT_FOUND = "Perfil não encontrado"

profile_tag = Tag(name="Profile", description="Account holder data")
profile_bp = APIBlueprint(
    'profile',
    __name__,
    url_prefix='/api/profile',
    abp_tags=[profile_tag]
)


def profile_resource(row: Dict[str, Any], user: UserContext, pending_email: Optional[str] = None) -> Dict[str, Any]:
    """Profile formatted for display: CPF and phone with punctuation."""
    profile = Profile.model_validate(row)
    response = ProfileResponse(
        id=profile.id,
        full_name=profile.full_name,
        cpf=profile.formatted_cpf,
        phone=format_phone(profile.phone) if profile.phone else None,
        phone_confirmed=profile.phone_confirmed,
        email=user.email,
        pending_email=pending_email
    )
    return current_app.hal_formatter.format_profile(response.model_dump(mode='json'))


def _load_profile(user: UserContext) -> Dict[str, Any]:
    row = current_backend().select_one("profiles", user.access_token, user.user_id)
    if row is None:
        raise NotFoundException(PROFILE_NOT_FOUND)
    return row


@profile_bp.get('', responses={200: ProfileResponse})
@require_jwt
def get_profile():
    """Read the caller's profile."""
    user = current_user()
    with tracer.start_as_current_span("profile.get", attributes={"user.id": user.user_id}):
        return jsonify(profile_resource(_load_profile(user), user)), 200


@profile_bp.put('', responses={200: ProfileResponse})
@require_jwt
def update_profile(body: UpdateProfileRequest):
    """
    Update name and phone. A new email is requested in the user's own
    session and stays pending until the link sent to it is followed.
    """
    user = current_user()

    with tracer.start_as_current_span("profile.update", attributes={"user.id": user.user_id}) as span:
        backend = current_backend()
        changes = body.profile_changes()

        if changes:
            row = backend.update("profiles", user.access_token, user.user_id, changes)
            if row is None:
                raise NotFoundException(PROFILE_NOT_FOUND)
        else:
            row = _load_profile(user)

        email_changed = body.email is not None and body.email != user.email
        if email_changed:
            backend.update_user(user.access_token, {"email": body.email})

        span.set_attributes({
            "profile.changed_fields": ",".join(sorted(changes)),
            "profile.email_changed": email_changed
        })
        logger.info("Profile updated", extra={**get_request_context(), "email_changed": email_changed})
        return jsonify(profile_resource(row, user, body.email if email_changed else None)), 200


@profile_bp.delete('')
@require_jwt
def delete_profile():
    """
    Delete the account's data and end its sessions.

    Pets, vaccines and notifications go with the profile through the
    backend's cascade.
    """
    user = current_user()

    with tracer.start_as_current_span("profile.delete", attributes={"user.id": user.user_id}):
        backend = current_backend()
        if not backend.delete("profiles", user.access_token, user.user_id):
            raise NotFoundException(PROFILE_NOT_FOUND)

        backend.sign_out(user.access_token)
        logger.warning("Account deleted", extra=get_request_context())
        return '', 204

# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
HAL (Hypertext Application Language) response formatting utilities.
Adds ``_links`` to resources and collections and builds RFC 7807 problem bodies.
"""

from typing import Dict, List, Any, Optional
from urllib.parse import urljoin

from models.responses import HalLink, ErrorResponse, ValidationErrorResponse

PROBLEM_BASE_URI = "https://api.carteirinhapet.com.br/problems/"


class HalLinkBuilder:
    """Builder for HAL links with proper URL construction."""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip('/') + '/'

    def build_link(
        self,
        path: str,
        method: str = "GET",
        content_type: Optional[str] = None,
        title: Optional[str] = None,
        templated: bool = False
    ) -> HalLink:
        """Build a HAL link with proper URL construction."""
        href = urljoin(self.base_url, path.lstrip('/'))

        return HalLink(
            href=href,
            method=method,
            type=content_type,
            title=title,
            templated=templated or None
        )

    def build_self_link(self, resource_path: str) -> HalLink:
        """Build self link for a resource."""
        return self.build_link(resource_path, title="Self")

    def build_collection_link(self, collection_path: str) -> HalLink:
        """Build link to parent collection."""
        return self.build_link(collection_path, title="Collection")

    def build_action_link(
        self,
        resource_path: str,
        action: Optional[str] = None,
        method: str = "POST",
        title: Optional[str] = None
    ) -> HalLink:
        """Build action link for a resource."""
        action_path = f"{resource_path}/{action}" if action else resource_path
        return self.build_link(
            action_path,
            method=method,
            content_type="application/json",
            title=title or (action or method).title()
        )


def _dump_links(links: Dict[str, HalLink]) -> Dict[str, Dict[str, Any]]:
    return {name: link.model_dump(exclude_none=True) for name, link in links.items()}


class HalResponseBuilder:
    """Builder for HAL resources, collections and problem bodies."""

    def __init__(self, base_url: str):
        self.base_url = base_url
        self.links = HalLinkBuilder(base_url)

    def build_resource_response(
        self,
        data: Dict[str, Any],
        links: Dict[str, HalLink]
    ) -> Dict[str, Any]:
        """Attach links to a resource representation."""
        response = dict(data)
        response["_links"] = _dump_links(links)
        return response

    def build_collection_response(
        self,
        items: List[Dict[str, Any]],
        collection_name: str,
        collection_path: str,
        extra_links: Optional[Dict[str, HalLink]] = None
    ) -> Dict[str, Any]:
        """Embed formatted items in a collection response."""
        links = {"self": self.links.build_self_link(collection_path)}
        links.update(extra_links or {})

        return {
            "_embedded": {collection_name: items},
            "total": len(items),
            "_links": _dump_links(links)
        }

    def build_error_response(
        self,
        error_type: str,
        title: str,
        status: int,
        detail: str,
        instance: str,
        errors: Optional[List[Dict[str, Any]]] = None
    ) -> Dict[str, Any]:
        """Build an RFC 7807 problem body."""
        model = ErrorResponse if errors is None else ValidationErrorResponse
        problem = model(
            type=PROBLEM_BASE_URI + error_type,
            title=title,
            status=status,
            detail=detail,
            instance=instance,
            errors=errors
        )
        return problem.model_dump(exclude_none=True)


class HalFormatter:
    """High-level formatter for the platform's resources and errors."""

    def __init__(self, base_url: str):
        self.builder = HalResponseBuilder(base_url)
        self.links = self.builder.links

    def format_pet(self, pet: Dict[str, Any]) -> Dict[str, Any]:
        path = f"/api/pets/{pet['id']}"
        return self.builder.build_resource_response(pet, {
            "self": self.links.build_self_link(path),
            "collection": self.links.build_collection_link("/api/pets"),
            "update": self.links.build_action_link(path, method="PUT", title="Update"),
            "delete": self.links.build_action_link(path, method="DELETE", title="Delete"),
            "vaccines": self.links.build_link("/api/vaccines", title="Vaccines"),
        })

    def format_vaccine(self, vaccine: Dict[str, Any]) -> Dict[str, Any]:
        path = f"/api/vaccines/{vaccine['id']}"
        return self.builder.build_resource_response(vaccine, {
            "self": self.links.build_self_link(path),
            "collection": self.links.build_collection_link("/api/vaccines"),
            "pet": self.links.build_link(f"/api/pets/{vaccine['pet_id']}", title="Pet"),
            "update": self.links.build_action_link(path, method="PUT", title="Update"),
            "delete": self.links.build_action_link(path, method="DELETE", title="Delete"),
        })

    def format_notification(self, notification: Dict[str, Any]) -> Dict[str, Any]:
        path = f"/api/notifications/{notification['id']}"
        links = {
            "collection": self.links.build_collection_link("/api/notifications"),
            "delete": self.links.build_action_link(path, method="DELETE", title="Delete"),
        }
        if not notification.get("is_read"):
            links["read"] = self.links.build_action_link(path, "read", title="Mark as read")
        return self.builder.build_resource_response(notification, links)

    def format_profile(self, profile: Dict[str, Any]) -> Dict[str, Any]:
        return self.builder.build_resource_response(profile, {
            "self": self.links.build_self_link("/api/profile"),
            "update": self.links.build_action_link("/api/profile", method="PUT", title="Update"),
            "password": self.links.build_action_link("/api/auth/password", method="PUT", title="Change password"),
        })

    def format_collection(
        self,
        collection_name: str,
        items: List[Dict[str, Any]],
        collection_path: str,
        extra_links: Optional[Dict[str, HalLink]] = None
    ) -> Dict[str, Any]:
        return self.builder.build_collection_response(items, collection_name, collection_path, extra_links)

    def format_validation_error(
        self,
        detail: str,
        instance: str,
        validation_errors: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        """Format validation error response."""
        return self.builder.build_error_response(
            "validation-error", "Validation Error", 422, detail, instance, validation_errors
        )

    def format_authentication_error(self, detail: str, instance: str) -> Dict[str, Any]:
        """Format authentication error response."""
        return self.builder.build_error_response(
            "authentication-required", "Authentication Required", 401, detail, instance
        )

    def format_not_found_error(self, detail: str, instance: str) -> Dict[str, Any]:
        """Format not found error response."""
        return self.builder.build_error_response(
            "resource-not-found", "Resource Not Found", 404, detail, instance
        )

    def format_backend_error(self, detail: str, instance: str, status: int = 502) -> Dict[str, Any]:
        """Format an error reported by the backend service."""
        return self.builder.build_error_response(
            "backend-error", "Backend Error", status, detail, instance
        )

    def format_server_error(self, detail: str, instance: str) -> Dict[str, Any]:
        """Format server error response."""
        return self.builder.build_error_response(
            "internal-server-error", "Internal Server Error", 500, detail, instance
        )


def create_hal_formatter(base_url: str) -> HalFormatter:
    """Create HAL formatter instance."""
    return HalFormatter(base_url)

# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Base record models with common fields and configuration.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class BaseRecord(BaseModel):
    """Base for rows stored in the backend tables."""

    model_config = ConfigDict(
        # Allow population by field name or alias
        populate_by_name=True,
        # Validate assignment
        validate_assignment=True,
        # Backend rows carry columns we do not model (joins, audit columns)
        extra='ignore'
    )

    id: Optional[str] = Field(None, description="Unique identifier assigned by the backend")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")


class BaseRequest(BaseModel):
    """Base model for request bodies."""

    model_config = ConfigDict(
        use_enum_values=True,
        extra='ignore'
    )

# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Base DTO (Application Layer).

Purpose:
    Canonical Pydantic base for all application-layer DTOs, plus the small
    generic shapes shared by every resource (pages and deletion receipts).
    Transport-agnostic.

Layer: application/schemas/dto
"""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class BaseDTO(BaseModel):
    """Base class for application-layer DTOs.

    Notes:
        - Must not import HTTP-specific bases.
        - Enforces strict fields (`extra='forbid'`).
    """

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class PageDTO[T](BaseDTO):
    """One page of an ordered listing plus the unpaginated total."""

    items: list[T]
    total: int
    page: int
    page_size: int


class DeletedDTO(BaseDTO):
    """Receipt returned after a successful deletion."""

    id: UUID
    message: str


class NameCheckDTO(BaseDTO):
    """Outcome of a unique-name availability check."""

    available: bool
    message: str

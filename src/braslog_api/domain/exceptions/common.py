# src/braslog_api/domain/exceptions/common.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""
Error taxonomy for the KPI service.

Purpose:
    The four failure classes surfaced to callers. Each carries a stable
    ``code`` that the HTTP boundary maps to a status:

        * EntityNotFound  -> NOT_FOUND   (404)
        * EntityConflict  -> CONFLICT    (409)
        * InvalidRequest  -> BAD_REQUEST (400)
        * StorageFailure  -> INTERNAL    (500)

Layer:
    domain/exceptions

Notes:
    - Messages are short Portuguese strings meant for end users.
    - Adapters translate persistence errors into ``StorageFailure``; raw
      driver text never ends up in the message.
"""

from __future__ import annotations

from braslog_api.domain.exceptions.base import DomainError

__all__ = [
    "EntityConflict",
    "EntityNotFound",
    "InvalidRequest",
    "StorageFailure",
]


class EntityNotFound(DomainError):
    """Raised when a referenced client, cost center, or KPI entry is absent."""

    code = "NOT_FOUND"


class EntityConflict(DomainError):
    """Raised on duplicate names, duplicate KPI triples, or blocked deletions."""

    code = "CONFLICT"


class InvalidRequest(DomainError):
    """Raised when input is rejected before any mutation (empty batch, bad range)."""

    code = "BAD_REQUEST"


class StorageFailure(DomainError):
    """Raised when the underlying store fails."""

    code = "INTERNAL"

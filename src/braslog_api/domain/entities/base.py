# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Base Entity (Domain Layer).

Purpose:
    Mixin for immutable domain entities. Provides frozen dataclass semantics
    and a small validation hook for invariants.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

NAME_MAX_LENGTH: Final[int] = 100


@dataclass(frozen=True, slots=True)
class BaseEntity:
    """Base mixin for domain entities.

    ``BaseEntity`` does not define concrete fields itself; it exists to
    provide common dataclass configuration (frozen + slots) and a standard
    invariant hook via :meth:`__post_init__`.
    """

    def __post_init__(self) -> None:  # noqa: D401
        """Hook for subclasses to extend with invariant checks."""
        return


def check_display_name(name: str) -> None:
    """Validate a unique display name shared by clients and cost centers.

    Args:
        name: Candidate name (already trimmed by callers).

    Raises:
        ValueError: If the name is blank or longer than ``NAME_MAX_LENGTH``.
    """
    if not name or not name.strip():
        raise ValueError("name must be non-blank")
    if name != name.strip():
        raise ValueError("name must be trimmed")
    if len(name) > NAME_MAX_LENGTH:
        raise ValueError(f"name must be at most {NAME_MAX_LENGTH} characters")

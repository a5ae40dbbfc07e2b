# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""
Root of the error taxonomy.

Use cases raise ``DomainError`` subclasses; the HTTP boundary maps
``code`` to a status and the CLI prints ``message`` to stderr. Neither
layer inspects anything else.
"""
from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """A failure a caller can act on.

    Args:
        message: Portuguese message shown to end users as is.
        details: JSON-friendly context (ids, offending fields, counts).
    """

    code: str = "DOMAIN_ERROR"

    def __init__(self, message: str = "", *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

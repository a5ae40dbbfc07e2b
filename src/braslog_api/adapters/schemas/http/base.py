# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""
Base HTTP Schema (Adapters Layer)

Every request body and response payload of the KPI API derives from
``BaseHTTPSchema``. Unknown fields are rejected (a PATCH with a typo must
fail loudly rather than silently keep the old value) and strings arrive
trimmed.

Request bodies take ``Decimal`` for revenue and percentages so validation
sees the exact submitted digits; response schemas carry ``float`` and leave
the API as JSON numbers.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class BaseHTTPSchema(BaseModel):
    """Strict transport schema base."""

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        str_strip_whitespace=True,
        ser_json_inf_nan="null",
    )

    def model_dump_http(self, **kwargs: Any) -> dict[str, Any]:
        """JSON-mode dump (dates as ISO strings, UUIDs as text)."""
        return self.model_dump(mode="json", **kwargs)

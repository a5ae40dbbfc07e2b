# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Presenter utilities and canonical envelope helpers.

Purpose:
    Thin, framework-aware helpers used by routers to consistently shape HTTP
    responses and headers.

Responsibilities:
    * Build SuccessEnvelope and PaginatedEnvelope instances.
    * Compute strong, quoted ETags from canonical JSON material.
    * Echo X-Request-ID on presented responses.

Layer:
    adapters/presenters
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from fastapi import Response

from braslog_api.adapters.schemas.http.envelopes import PaginatedEnvelope, SuccessEnvelope
from braslog_api.infrastructure.logging.logger import get_json_logger

_LOGGER = get_json_logger(__name__)


def as_float(value: Decimal | None) -> float | None:
    """Return ``value`` as a JSON number, keeping ``None``."""
    return float(value) if value is not None else None


def compute_quoted_etag(payload: Mapping[str, Any]) -> str:
    """Return a quoted strong ETag (SHA-256 of canonical JSON for ``payload``)."""
    material = json.dumps(
        payload,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    ).encode("utf-8")
    return f'"{hashlib.sha256(material).hexdigest()}"'


@dataclass(slots=True)
class PresentResult[T]:
    """Presentation result envelope.

    Attributes:
        body: A Pydantic envelope instance.
        headers: Extra HTTP headers to apply.
        status_code: Optional HTTP status override.
    """

    body: T
    headers: Mapping[str, str]
    status_code: int | None = None


class BasePresenter:
    """Base presenter for HTTP response shaping in adapter layers."""

    @staticmethod
    def present_success(
        *,
        data: Any,
        trace_id: str | None = None,
        etag: bool = False,
        status_code: int | None = None,
    ) -> PresentResult[SuccessEnvelope[Any]]:
        """Build a SuccessEnvelope and its headers.

        Behavior:
            * Always echoes ``X-Request-ID`` when provided.
            * With ``etag=True``, sets a **quoted** strong ``ETag`` from the body.
        """
        body = SuccessEnvelope[Any](data=data)
        headers: dict[str, str] = {}
        if trace_id:
            headers["X-Request-ID"] = trace_id
        if etag:
            headers["ETag"] = compute_quoted_etag(body.model_dump_http())
        return PresentResult(body=body, headers=headers, status_code=status_code)

    @staticmethod
    def present_paginated(
        *,
        items: Sequence[Any],
        page: int,
        page_size: int,
        total: int,
        trace_id: str | None = None,
    ) -> PresentResult[PaginatedEnvelope[Any]]:
        """Build a PaginatedEnvelope and attach optional headers."""
        body = PaginatedEnvelope[Any](
            page=page, page_size=page_size, total=total, items=list(items)
        )
        headers: dict[str, str] = {}
        if trace_id:
            headers["X-Request-ID"] = trace_id
        return PresentResult(body=body, headers=headers)

    @staticmethod
    def apply_headers(result: PresentResult[Any], response: Response) -> None:
        """Apply headers and optional status code to the outgoing response."""
        try:
            response.headers.update(dict(result.headers))
        except Exception:  # pragma: no cover
            _LOGGER.exception("presenter_apply_headers_failed", extra={"headers": result.headers})

        if result.status_code is not None:
            response.status_code = result.status_code

# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""
Base Router (Adapters Layer)

Purpose:
    Provide a canonical APIRouter wrapper and shared utilities for Braslog HTTP endpoints:
      - Versioned routing with stable prefixes (e.g., "/v1/clients").
      - Standard error response mapping using ErrorEnvelope.
      - Pagination query dependency with hard caps.
      - Helper to emit presenter results with headers (ETag, X-Request-ID).

Layer:
    adapters/routers
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any

from fastapi import APIRouter, Query, Request, Response

from braslog_api.adapters.presenters.base_presenter import BasePresenter, PresentResult
from braslog_api.adapters.schemas.http.envelopes import ErrorEnvelope
from braslog_api.infrastructure.logging.logger import get_json_logger

_LOGGER = get_json_logger(__name__)

TagType = str | Enum


@dataclass(frozen=True)
class PageParams:
    """Validated pagination parameters.

    Attributes:
        page: 1-indexed page number.
        page_size: Items per page.
    """

    page: int
    page_size: int


def request_trace_id(request: Request) -> str | None:
    """Return the correlation id assigned by ``RequestIdMiddleware``."""
    return getattr(request.state, "request_id", None)


class BaseRouter(APIRouter):
    """Canonical router wrapper for Braslog HTTP endpoints.

    Args:
        version: API version segment (e.g., "v1").
        resource: Plural resource segment (e.g., "clients").
        prefix: Optional explicit prefix (overrides version/resource).
        tags: Default tags applied to all routes mounted on this router.
        dependencies: Optional global dependencies for all routes.
        **kwargs: Additional APIRouter kwargs.
    """

    MIN_PAGE: int = 1
    MIN_PAGE_SIZE: int = 1
    MAX_PAGE_SIZE: int = 200
    DEFAULT_PAGE_SIZE: int = 50

    def __init__(
        self,
        *,
        version: str,
        resource: str,
        prefix: str | None = None,
        tags: Sequence[TagType] | None = None,
        dependencies: Sequence[Any] | None = None,
        **kwargs: Any,
    ) -> None:
        computed_prefix = prefix or f"/{version}/{resource}"
        super().__init__(
            prefix=computed_prefix,
            tags=list(tags) if tags is not None else None,
            dependencies=list(dependencies) if dependencies is not None else None,
            **kwargs,
        )
        _LOGGER.debug(
            "router_initialized",
            extra={"prefix": computed_prefix, "tags": [str(t) for t in tags or []]},
        )

    @staticmethod
    def send(response: Response, result: PresentResult[Any]) -> Any:
        """Apply presenter headers/status to ``response`` and return the envelope."""
        BasePresenter.apply_headers(result, response)
        return result.body

    @classmethod
    def page_params(
        cls,
        page: Annotated[int, Query(ge=1, description="1-indexed page number.")] = 1,
        page_size: Annotated[
            int, Query(ge=1, description="Items per page (capped at MAX_PAGE_SIZE).")
        ] = 50,
    ) -> PageParams:
        """Return pagination parameters clamped to the router's caps."""
        return PageParams(
            page=max(page, cls.MIN_PAGE),
            page_size=min(max(page_size, cls.MIN_PAGE_SIZE), cls.MAX_PAGE_SIZE),
        )

    @staticmethod
    def std_error_responses() -> dict[int | str, dict[str, Any]]:
        """Return the canonical error response mapping for endpoints."""
        return {
            400: {"model": ErrorEnvelope, "description": "Bad request."},
            401: {"model": ErrorEnvelope, "description": "Unauthorized (missing/invalid auth)."},
            404: {"model": ErrorEnvelope, "description": "Not found."},
            409: {"model": ErrorEnvelope, "description": "Conflict."},
            422: {"model": ErrorEnvelope, "description": "Unprocessable content."},
            500: {"model": ErrorEnvelope, "description": "Internal server error."},
        }

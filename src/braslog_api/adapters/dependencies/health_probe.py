# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Readiness probe wiring: a ``DbProbe`` over the shared sessionmaker."""

from __future__ import annotations

from braslog_api.infrastructure.database.session import get_engine, get_sessionmaker
from braslog_api.infrastructure.health.probe import DbProbe


def probe_dependency() -> DbProbe:
    # get_engine() initializes the sessionmaker when the lifespan has not run.
    get_engine()
    return DbProbe(session_factory=get_sessionmaker())

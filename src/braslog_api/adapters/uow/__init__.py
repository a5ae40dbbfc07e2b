# src/braslog_api/adapters/uow/__init__.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Concrete units of work. Use cases only see ``application.uow.UnitOfWork``."""

from __future__ import annotations

from .sqlalchemy_uow import SqlAlchemyUnitOfWork

__all__ = ["SqlAlchemyUnitOfWork"]

# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Use case: check whether a client name is available."""

from __future__ import annotations

from typing import Final, cast

from braslog_api.application.schemas.dto.base import NameCheckDTO
from braslog_api.application.schemas.dto.clients import ValidateNameRequest
from braslog_api.application.uow import UnitOfWork
from braslog_api.application.use_cases.clients.create_client import DUPLICATE_CLIENT_NAME
from braslog_api.domain.interfaces.repositories.client_repository import ClientRepository

NAME_AVAILABLE: Final[str] = "Nome disponível"
NAME_REQUIRED: Final[str] = "Nome é obrigatório"


class ValidateClientNameUseCase:
    """Report whether ``name`` is free, ignoring the client ``exclude_id``."""

    def __init__(self, *, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, req: ValidateNameRequest) -> NameCheckDTO:
        name = req.name.strip()
        if not name:
            return NameCheckDTO(available=False, message=NAME_REQUIRED)
        async with self._uow as tx:
            repo = cast(ClientRepository, tx.get_repository(ClientRepository))
            taken = await repo.find_by_name(name, exclude_id=req.exclude_id)
        if taken is not None:
            return NameCheckDTO(available=False, message=DUPLICATE_CLIENT_NAME)
        return NameCheckDTO(available=True, message=NAME_AVAILABLE)

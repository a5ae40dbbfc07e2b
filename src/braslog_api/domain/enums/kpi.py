# src/braslog_api/domain/enums/kpi.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""KPI domain enumerations.

Purpose:
    Closed vocabularies shared by every layer: the five tracked KPI types and
    the ACTIVE/INACTIVE status used by clients and cost centers.

Layer:
    domain/enums

Notes:
    Enum values are the persisted/wire values (Portuguese, product locale).
    Member names are the English identifiers used in code.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Final

REVENUE_MAX: Final[Decimal] = Decimal("999999999.99")
PERCENT_MAX: Final[Decimal] = Decimal("100")


class KpiType(str, Enum):
    """Tracked KPI types.

    REVENUE is a monetary amount (BRL); every other type is a percentage.
    """

    REVENUE = "RECEITA"
    ON_TIME = "ON_TIME"
    OCCUPANCY = "OCUPACAO"
    THIRD_PARTY = "TERCEIRO"
    AVAILABILITY = "DISPONIBILIDADE"

    @property
    def is_currency(self) -> bool:
        """Return True when values of this type are summed rather than averaged."""
        return self is KpiType.REVENUE

    @property
    def upper_bound(self) -> Decimal:
        """Return the inclusive upper bound accepted for values of this type."""
        return REVENUE_MAX if self is KpiType.REVENUE else PERCENT_MAX

    @property
    def title(self) -> str:
        """Return the human-readable title used in reports."""
        return _TITLES[self]


_TITLES: Final[dict[KpiType, str]] = {
    KpiType.REVENUE: "Receita",
    KpiType.ON_TIME: "On Time",
    KpiType.OCCUPANCY: "Ocupação",
    KpiType.THIRD_PARTY: "Terceiro",
    KpiType.AVAILABILITY: "Disponibilidade",
}


class RecordStatus(str, Enum):
    """Lifecycle status for clients and cost centers."""

    ACTIVE = "ATIVO"
    INACTIVE = "INATIVO"

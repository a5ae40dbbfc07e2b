# src/braslog_api/domain/services/kpi_values.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""KPI value guards and daily snapshot projections.

Purpose:
    Plain guard functions for KPI values plus the two shape conversions used
    by the daily entry form:

        * ``flatten_snapshot``: per-client partial records -> flat
          ``(client_id, kpi_type, value)`` triples.
        * ``build_form_projection``: persisted entries -> per-client records.

Layer:
    domain/services

Notes:
    An absent field (``None``) means "no value" and is skipped; a present
    ``0`` is a value. Values are quantized to two decimal places (half-up),
    matching the storage precision, so comparisons against persisted rows are
    exact.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Final
from uuid import UUID

from braslog_api.domain.entities.kpi_entry import KpiEntry, KpiKey
from braslog_api.domain.enums.kpi import KpiType

_CENTS: Final[Decimal] = Decimal("0.01")

#: Field name of each KPI type inside a per-client daily record.
FORM_FIELDS: Final[Mapping[KpiType, str]] = {
    KpiType.REVENUE: "revenue",
    KpiType.ON_TIME: "on_time",
    KpiType.OCCUPANCY: "occupancy",
    KpiType.THIRD_PARTY: "third_party",
    KpiType.AVAILABILITY: "availability",
}


@dataclass(frozen=True, slots=True)
class KpiTriple:
    """One flattened KPI measurement for a client on the snapshot date."""

    client_id: UUID
    kpi_type: KpiType
    value: Decimal

    @property
    def key(self) -> KpiKey:
        return (self.client_id, self.kpi_type)


@dataclass(frozen=True, slots=True)
class ClientDailyValues:
    """Per-client partial record: up to one value per KPI type."""

    client_id: UUID
    revenue: Decimal | None = None
    on_time: Decimal | None = None
    occupancy: Decimal | None = None
    third_party: Decimal | None = None
    availability: Decimal | None = None

    def value_for(self, kpi_type: KpiType) -> Decimal | None:
        """Return the value carried for ``kpi_type`` (None when absent)."""
        value: Decimal | None = getattr(self, FORM_FIELDS[kpi_type])
        return value


@dataclass(frozen=True, slots=True)
class FormProjection:
    """Client-keyed projection of one day's entries, in form shape."""

    date: date
    entries: tuple[ClientDailyValues, ...] = field(default_factory=tuple)


def quantize_value(value: Decimal | int | float | str) -> Decimal:
    """Return ``value`` as a Decimal rounded half-up to two decimal places.

    Raises:
        ValueError: If the value is not a finite number.
    """
    try:
        dec = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError("value must be numeric") from exc
    if not dec.is_finite():
        raise ValueError("value must be finite")
    return dec.quantize(_CENTS, rounding=ROUND_HALF_UP)


def check_kpi_value(kpi_type: KpiType, value: Decimal) -> str | None:
    """Validate a value against the range rule of its KPI type.

    Args:
        kpi_type: KPI type the value belongs to.
        value: Candidate value.

    Returns:
        None when valid, otherwise a short user-facing message.
    """
    if not value.is_finite():
        return "Valor do KPI deve ser um número válido"
    if kpi_type.is_currency:
        if value < 0:
            return "Receita deve ser um valor positivo"
        if value > kpi_type.upper_bound:
            return "Valor da receita muito alto"
        return None
    if value < 0 or value > kpi_type.upper_bound:
        return "Percentual deve ser entre 0 e 100"
    return None


def flatten_snapshot(rows: Iterable[ClientDailyValues]) -> list[KpiTriple]:
    """Flatten per-client partial records into KPI triples.

    Absent fields are skipped. When the same client appears more than once,
    the last value supplied for a (client, kpi_type) key wins.

    Args:
        rows: Per-client partial records.

    Returns:
        Triples in first-seen key order with quantized values.
    """
    by_key: dict[KpiKey, KpiTriple] = {}
    for row in rows:
        for kpi_type in KpiType:
            raw = row.value_for(kpi_type)
            if raw is None:
                continue
            triple = KpiTriple(
                client_id=row.client_id, kpi_type=kpi_type, value=quantize_value(raw)
            )
            by_key[triple.key] = triple
    return list(by_key.values())


def build_form_projection(day: date, entries: Iterable[KpiEntry]) -> FormProjection:
    """Project persisted entries of one day into per-client form records.

    Args:
        day: The snapshot date.
        entries: Entries dated ``day`` (other dates are ignored).

    Returns:
        FormProjection with one record per client, in first-seen order.
    """
    values: dict[UUID, dict[str, Decimal]] = {}
    for entry in entries:
        if entry.date != day:
            continue
        values.setdefault(entry.client_id, {})[FORM_FIELDS[entry.kpi_type]] = entry.kpi_value
    return FormProjection(
        date=day,
        entries=tuple(
            ClientDailyValues(client_id=client_id, **fields) for client_id, fields in values.items()
        ),
    )

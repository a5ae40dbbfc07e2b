# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Prometheus collectors for the KPI service.

Collectors are created on first use and looked up by name afterwards, so
importing a module twice (uvicorn reload, test collection) never trips the
registry's duplicate-name check. When tests swap ``prometheus_client.REGISTRY``
the local cache is dropped and collectors are re-registered on the new one.

Series:
    braslog_kpi_reconciled_rows_total{operation}   insert|update|delete
    braslog_kpi_snapshot_writes_total{result}      applied|noop
    braslog_http_request_duration_seconds{...}     see middleware.request_metrics
    readyz_db_latency_seconds                      readiness probe latency
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Final

import prometheus_client as prom
from prometheus_client import Counter, Histogram

_log = logging.getLogger(__name__)

_PROBE_BUCKETS: Final[tuple[float, ...]] = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5)

_lock = threading.RLock()
_cache: dict[str, Any] = {}
_cache_registry: int | None = None


def _get_or_create[C: (Histogram, Counter)](
    kind: type[C], name: str, help_text: str, **kwargs: Any
) -> C:
    """Return the collector ``name`` on the active registry, registering it if needed."""
    global _cache_registry
    with _lock:
        if _cache_registry != id(prom.REGISTRY):
            _cache.clear()
            _cache_registry = id(prom.REGISTRY)

        found = _cache.get(name)
        if found is None:
            # Registered by an earlier import of this module (reload).
            found = getattr(prom.REGISTRY, "_names_to_collectors", {}).get(name)
        if found is None:
            try:
                found = kind(name, help_text, registry=prom.REGISTRY, **kwargs)
            except ValueError:
                _log.exception("metrics.register_failed", extra={"metric": name})
                raise
        if not isinstance(found, kind):
            raise TypeError(f"Metric {name!r} is already registered as {type(found).__name__}")
        _cache[name] = found
        return found


def _get_or_create_hist(
    name: str,
    help_text: str,
    *,
    buckets: tuple[float, ...] = _PROBE_BUCKETS,
    labelnames: tuple[str, ...] = (),
) -> Histogram:
    return _get_or_create(Histogram, name, help_text, labelnames=labelnames, buckets=buckets)


def _get_or_create_counter(
    name: str, help_text: str, *, labelnames: tuple[str, ...] = ()
) -> Counter:
    return _get_or_create(Counter, name, help_text, labelnames=labelnames)


def get_readyz_db_latency_seconds() -> Histogram:
    """Latency of the readiness ``SELECT 1``."""
    return _get_or_create_hist(
        "readyz_db_latency_seconds", "Latency of Postgres readiness probe (seconds)."
    )


def get_kpi_reconciled_rows_total() -> Counter:
    """KPI entry rows written by daily snapshot reconciliation, by ``operation``."""
    return _get_or_create_counter(
        "braslog_kpi_reconciled_rows_total",
        "KPI entry rows written by daily snapshot reconciliation",
        labelnames=("operation",),
    )


def get_kpi_snapshot_writes_total() -> Counter:
    """Daily snapshot submissions, by ``result`` (``applied`` or ``noop``)."""
    return _get_or_create_counter(
        "braslog_kpi_snapshot_writes_total",
        "Daily KPI snapshot submissions by result",
        labelnames=("result",),
    )

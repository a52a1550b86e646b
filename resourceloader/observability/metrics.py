from __future__ import annotations

from collections import Counter
from typing import Dict

from prometheus_client import Counter as PromCounter

# Named counters (process-local)
_NAMED = Counter()

_PROM_MTIME_LOOKUPS = PromCounter(
    "resourceloader_modified_time_lookups_total",
    "Module modified-time lookups",
    ["result"],
)

_PROM_DEP_WRITES = PromCounter(
    "resourceloader_dependency_writes_total",
    "Dependency record writes",
    ["outcome"],
)


def reset_metrics() -> None:
    """
    Test helper: clears process-local counters to avoid cross-test leakage.
    Prometheus counters are cumulative and are left alone.
    """
    _NAMED.clear()


def inc_named(name: str, value: int = 1) -> None:
    if not name:
        return
    _NAMED[name] += int(value)


def inc_mtime_lookup(result: str) -> None:
    """result: "hit" | "miss" """
    inc_named(f"mtime_cache_{result}")
    _PROM_MTIME_LOOKUPS.labels(result=result).inc()


def inc_dependency_write(outcome: str) -> None:
    """outcome: "written" | "unchanged" | "failed" """
    inc_named(f"deps_{outcome}")
    _PROM_DEP_WRITES.labels(outcome=outcome).inc()


def snapshot_named() -> Dict[str, int]:
    return dict(_NAMED)

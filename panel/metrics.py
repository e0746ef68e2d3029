from __future__ import annotations

from prometheus_client import Counter

DATABASE_PROBE_TOTAL = Counter(
    "panel_database_probe_total",
    "Number of database connection probes run by the settings wizard",
    labelnames=("driver", "result"),
)

EGG_VARIABLE_VALIDATION_TOTAL = Counter(
    "panel_egg_variable_validation_total",
    "Number of egg variable definitions validated",
    labelnames=("result",),
)

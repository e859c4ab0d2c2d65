"""Prometheus metrics for monitoring ledger views, contract edits and enrichment health"""

from prometheus_client import Counter, Histogram

# Ledger metrics
ledger_view_counter = Counter(
    "makkaan_ledger_views_total",
    "Ledger views served",
    ["audience"],  # admin | client
)

late_row_counter = Counter(
    "makkaan_ledger_late_rows_total",
    "Installment rows found late while reconciling a ledger",
)

ledger_row_mutation_counter = Counter(
    "makkaan_ledger_row_mutations_total",
    "Ledger row and child payment changes",
    ["action"],  # row_created | row_updated | row_deleted | child_added | child_deleted
)

# Contract metrics
contract_mutation_counter = Counter(
    "makkaan_contract_mutations_total",
    "Client contract changes made by administrators",
    ["action"],  # created | updated | deleted
)

progress_enrichment_failures_counter = Counter(
    "makkaan_progress_enrichment_failures_total",
    "Contracts whose list-view progress could not be computed",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_ledger_view(audience: str, late_rows: int) -> None:
    """Record a served ledger and how many of its rows were late"""
    ledger_view_counter.labels(audience=audience).inc()
    if late_rows > 0:
        late_row_counter.inc(late_rows)

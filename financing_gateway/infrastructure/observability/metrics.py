"""Prometheus metrics for extraction quality and simulation load"""

from prometheus_client import Counter, Histogram

# Extraction metrics
extraction_counter = Counter(
    "financing_extraction_total",
    "Document extractions attempted",
    ["outcome"],  # valid | invalid | failed
)

# Simulation metrics
simulation_counter = Counter(
    "financing_simulation_total",
    "Amortization simulations computed",
    ["system"],  # PRICE | PRICE TR | SAC
)

extraordinary_payment_counter = Counter(
    "financing_extraordinary_payments_total",
    "Extraordinary payments applied to simulations",
    ["effect"],
)

simulation_duration_histogram = Histogram(
    "financing_simulation_duration_seconds",
    "Time spent computing a full schedule",
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_extraction(parsed: bool, valid: bool) -> None:
    """Record extraction outcome for monitoring document quality"""
    if not parsed:
        outcome = "failed"
    elif valid:
        outcome = "valid"
    else:
        outcome = "invalid"
    extraction_counter.labels(outcome=outcome).inc()


def record_simulation(system: str, payment_effects: list[str]) -> None:
    """Record simulation by amortization system and the payments it applied"""
    simulation_counter.labels(system=system).inc()
    for effect in payment_effects:
        extraordinary_payment_counter.labels(effect=effect).inc()

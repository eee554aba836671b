"""Prometheus metrics definitions for Dinnerboard."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "dinnerboard_http_requests_total",
    "Total number of HTTP requests processed by the Dinnerboard API",
    ["method", "path", "status"],
)

REQUEST_LATENCY = Histogram(
    "dinnerboard_http_request_duration_seconds",
    "Latency of HTTP requests processed by the Dinnerboard API",
    ["method", "path"],
)

GROCERY_LIST_REGENERATIONS = Counter(
    "dinnerboard_grocery_list_regenerations_total",
    "Number of grocery lists generated and activated",
)

GROCERY_ITEMS_GENERATED = Counter(
    "dinnerboard_grocery_items_generated_total",
    "Number of grocery list items produced by regeneration runs",
)

SUGGESTION_REQUESTS = Counter(
    "dinnerboard_suggestion_requests_total",
    "Number of meal suggestion rankings computed",
)

__all__ = [
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "GROCERY_LIST_REGENERATIONS",
    "GROCERY_ITEMS_GENERATED",
    "SUGGESTION_REQUESTS",
]

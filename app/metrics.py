"""Prometheus metrics definitions for venue-planner.

Exposes metrics for:
1. HTTP API metrics (requests, latency, errors)
2. Google Maps API client metrics (calls, latency, errors)
3. Object storage uploads
4. Venue store operations and form saves
"""
from prometheus_client import Counter, Histogram, Gauge

# =============================================================================
# HTTP API METRICS
# =============================================================================

# endpoint is the matched route template, or "unmatched"
HTTP_REQUESTS_TOTAL = Counter(
    "http_requests_total",
    "Total number of HTTP requests by route",
    ["method", "endpoint", "status_code"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# The route is not known until routing has run, so only the method labels this
HTTP_REQUESTS_IN_PROGRESS = Gauge(
    "http_requests_in_progress",
    "Number of HTTP requests currently being processed",
    ["method"],
)

FORM_UPLOAD_SIZE_BYTES = Histogram(
    "form_upload_size_bytes",
    "Multipart image and brochure upload body size in bytes",
    ["endpoint"],
    buckets=(10_000, 100_000, 500_000, 1_000_000, 5_000_000, 10_000_000, 25_000_000, 50_000_000),
)

# =============================================================================
# GOOGLE MAPS API CLIENT METRICS
# =============================================================================

GOOGLE_MAPS_API_CALLS_TOTAL = Counter(
    "google_maps_api_calls_total",
    "Total number of Google Maps API calls",
    ["endpoint", "status"],  # status: success, error
)

GOOGLE_MAPS_API_CALL_DURATION_SECONDS = Histogram(
    "google_maps_api_call_duration_seconds",
    "Google Maps API call latency in seconds",
    ["endpoint"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

GOOGLE_MAPS_API_ERRORS_TOTAL = Counter(
    "google_maps_api_errors_total",
    "Total number of Google Maps API errors",
    ["endpoint", "error_type"],  # error_type: http_error, timeout, connection_error
)

# =============================================================================
# OBJECT STORAGE METRICS
# =============================================================================

STORAGE_UPLOADS_TOTAL = Counter(
    "storage_uploads_total",
    "Total number of object storage uploads",
    ["bucket", "status"],
)

STORAGE_UPLOAD_DURATION_SECONDS = Histogram(
    "storage_upload_duration_seconds",
    "Object storage upload latency in seconds",
    ["bucket"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

# =============================================================================
# VENUE STORE & FORM METRICS
# =============================================================================

VENUE_STORE_OPERATIONS_TOTAL = Counter(
    "venue_store_operations_total",
    "Total number of venue store operations",
    ["operation", "status"],  # operation: list, get, insert, update
)

VENUES_IN_SNAPSHOT = Gauge(
    "venues_in_snapshot",
    "Number of venues in the last fetched list snapshot",
)

VENUE_FORM_SAVES_TOTAL = Counter(
    "venue_form_saves_total",
    "Total number of venue form saves",
    ["mode", "status"],  # mode: insert, update
)

DRIVE_TIME_COMPUTATIONS_TOTAL = Counter(
    "drive_time_computations_total",
    "Drive-time recomputations triggered by form saves",
    ["result"],  # result: computed, no_value, skipped_no_client
)

OPEN_FORM_SESSIONS = Gauge(
    "open_form_sessions",
    "Number of venue form sessions currently open",
)

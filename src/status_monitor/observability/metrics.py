from prometheus_client import Counter, Gauge, Histogram

# HTTP
HTTP_REQUEST_DURATION = Histogram(
    "sm_http_request_duration_seconds",
    "Duration of HTTP requests in seconds",
    ["method", "path", "status_code"],
)
HTTP_REQUESTS_TOTAL = Counter(
    "sm_http_requests_total",
    "Total number of HTTP requests",
    ["method", "path", "status_code"],
)

# Business
REPORTS_RECEIVED_TOTAL = Counter(
    "sm_reports_received_total",
    "Total number of device reports ingested",
)
DEVICE_TRANSITIONS_TOTAL = Counter(
    "sm_device_transitions_total",
    "Total number of device liveness transitions",
    ["to_status", "source"],
)
SYNTHETIC_REPORTS_TOTAL = Counter(
    "sm_synthetic_reports_total",
    "Total number of synthetic offline reports appended",
    ["source"],
)
DEVICES_BY_STATUS = Gauge(
    "sm_devices",
    "Number of devices by evaluated status",
    ["status"],
)

# Sweep
SWEEP_TICKS_TOTAL = Counter(
    "sm_sweep_ticks_total",
    "Total number of sweep ticks",
    ["outcome"],
)
SWEEP_DURATION = Histogram(
    "sm_sweep_duration_seconds",
    "Duration of sweep ticks in seconds",
    buckets=(0.005, 0.01, 0.05, 0.1, 0.5, 1, 5, 15),
)

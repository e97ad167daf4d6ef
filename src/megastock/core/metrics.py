from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "path", "status_code"],
)

REMOTE_STORE_COUNT = Counter(
    "remote_store_requests_total",
    "Total number of remote store requests",
    ["operation", "status"],
)

REMOTE_STORE_DURATION = Histogram(
    "remote_store_duration_seconds",
    "Duration of remote store requests in seconds",
    ["operation"],
)

PRODUCT_RESOLUTIONS = Counter(
    "product_store_resolutions_total",
    "Product collection loads by the source that served them",
    ["source"],
)

LOCAL_STORAGE_FAILURES = Counter(
    "local_storage_failures_total",
    "Swallowed local storage failures",
    ["operation"],
)

"""
Prometheus metrics definitions for the relay.
All metrics are registered here and can be imported by other modules.
"""
from prometheus_client import Counter, Histogram

# HTTP request metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'path', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'path'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0]
)

# Error metrics
errors_total = Counter(
    'errors_total',
    'Total errors',
    ['error_type']
)

# Upload metrics
# outcome: succeeded, rejected_input, rejected_config, failed_upstream
uploads_total = Counter(
    'uploads_total',
    'Total upload attempts by outcome',
    ['outcome']
)

upload_size_bytes = Histogram(
    'upload_size_bytes',
    'Size of files forwarded to storage',
    buckets=[64 * 1024, 256 * 1024, 1024 ** 2, 2 * 1024 ** 2, 5 * 1024 ** 2, 10 * 1024 ** 2]
)

storage_request_duration_seconds = Histogram(
    'storage_request_duration_seconds',
    'Duration of create calls against the storage API',
    ['provider', 'status'],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0]
)

cors_blocked_total = Counter(
    'cors_blocked_total',
    'Requests refused by the origin allow-list'
)

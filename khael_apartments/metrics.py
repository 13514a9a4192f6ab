"""
Prometheus metrics for listing mutations, media traffic and admin logins.

Metrics are exposed via the /metrics endpoint for scraping by Prometheus.

Example:
    >>> from khael_apartments.metrics import media_upload_duration, media_uploads
    >>> with media_upload_duration.labels(media_type="image").time():
    ...     uploaded = media_host.upload(data, folder="khael-apartments/images")
    >>> media_uploads.labels(media_type="image", status="success").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# =============================================================================
# Listing Metrics
# =============================================================================

apartment_mutations = Counter(
    "khael_apartments_mutations_total",
    "Total number of store mutations performed through the admin API",
    ["entity", "operation"],
)
"""
Counter for store mutations.

Labels:
    entity: apartment, image or video
    operation: create, update, delete or set_primary
"""

# =============================================================================
# Media Host Metrics
# =============================================================================

media_uploads = Counter(
    "khael_media_uploads_total",
    "Total uploads sent to the external media host",
    ["media_type", "status"],
)
"""
Counter for media host uploads.

Labels:
    media_type: image or video
    status: success or failure
"""

media_upload_duration = Histogram(
    "khael_media_upload_duration_seconds",
    "Duration of a single upload to the external media host in seconds",
    ["media_type"],
    buckets=(0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, float("inf")),
)
"""
Histogram for media host upload latency.

Buckets: 0.25s, 0.5s, 1s, 2.5s, 5s, 10s, 30s, 60s, +Inf
"""

media_remote_deletes = Counter(
    "khael_media_remote_deletes_total",
    "Total remote media deletions attempted (advisory, failures are swallowed)",
    ["media_type", "status"],
)
"""
Counter for remote media deletions.

Labels:
    media_type: image or video
    status: success, failure or skipped (no public id could be derived)
"""

# =============================================================================
# Auth Metrics
# =============================================================================

login_attempts = Counter(
    "khael_login_attempts_total",
    "Total admin login attempts",
    ["status"],
)
"""Counter for admin logins, labelled success or failure."""

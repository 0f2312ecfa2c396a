"""Prometheus metrics for the Storage Area Provisioner."""

from prometheus_client import Counter, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "storage_area_reconcile_total",
    "Total number of bucket reconciliations",
    ["result"],
)

reconcile_duration_seconds = Histogram(
    "storage_area_reconcile_duration_seconds",
    "Duration of bucket reconciliations in seconds",
    buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
)

# S3 operation metrics
bucket_operations_total = Counter(
    "storage_area_bucket_operations_total",
    "Total number of S3 bucket configuration operations",
    ["operation", "result"],
)

# Key management metrics
kms_keys_created_total = Counter(
    "storage_area_kms_keys_created_total",
    "Total number of KMS keys created for bucket encryption",
    ["result"],
)

# Existence propagation metrics
wait_duration_seconds = Histogram(
    "storage_area_wait_duration_seconds",
    "Time spent waiting for a resource to become visible",
    ["target", "result"],
    buckets=[0.1, 0.5, 1.0, 5.0, 15.0, 30.0, 60.0, 120.0],
)

# Teardown metrics
objects_deleted_total = Counter(
    "storage_area_objects_deleted_total",
    "Total number of objects submitted for deletion",
    ["result"],
)

delete_batches_total = Counter(
    "storage_area_delete_batches_total",
    "Total number of DeleteObjects batch requests",
    ["result"],
)

# Caller-facing operation metrics
operation_total = Counter(
    "storage_area_operation_total",
    "Total number of provision, unprovision and validate calls",
    ["operation", "result"],
)

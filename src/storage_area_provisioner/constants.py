"""Constants for the Storage Area Provisioner."""

# Service name used in logs, metrics and traces
SERVICE_NAME = "storage-area-provisioner"

# Bucket naming
BUCKET_NAME_MAX_LENGTH = 63
BUCKET_NAME_PREFIX_MAX_LENGTH = 58
BUCKET_NAME_HASH_LENGTH = 5
BUCKET_NAME_SEPARATOR = "-"

# Object keys
FOLDER_SEPARATOR = "/"

# S3 API limit for a single DeleteObjects request
DELETE_BATCH_SIZE = 1000

# Region reported by GetBucketLocation as an empty constraint
DEFAULT_REGION = "us-east-1"
LEGACY_REGION_ALIASES = {"EU": "eu-west-1"}

# Encryption algorithms
SSE_AES256 = "AES256"
SSE_AWS_KMS = "aws:kms"

# Policy templates
BUCKET_POLICY_RESOURCE = "bucket-policy.json"
KMS_POLICY_RESOURCE = "kms-policy.json"
BUCKET_NAME_PLACEHOLDER = "{bucketName}"
ACCOUNT_ID_PLACEHOLDER = "{accountID}"

# Remote configuration identifiers
LIFECYCLE_RULE_ID = "storage-area-noncurrent-expiration"
LIFECYCLE_TRANSITION_MINIMUM_SIZE = "all_storage_classes_128K"
INTELLIGENT_TIERING_ID = "storage-area-intelligent-tiering"
KMS_KEY_DESCRIPTION = "Storage-area key for bucket '{bucket_name}'"

# Lifecycle bounds
MIN_DAYS_AFTER_NONCURRENT = 1
MIN_VERSIONS_TO_RETAIN = 1
MAX_VERSIONS_TO_RETAIN = 100

# Intelligent tiering bounds
ARCHIVE_ACCESS_MIN_DAYS = 90
DEEP_ARCHIVE_ACCESS_MIN_DAYS = 180
TIERING_MAX_DAYS = 730

# Component kinds
KIND_STORAGE_AREA = "storage"

# Error codes returned by S3 when a resource is absent
NOT_FOUND_CODES = {"404", "NoSuchBucket", "NotFound", "NoSuchKey"}
NO_ENCRYPTION_CODE = "ServerSideEncryptionConfigurationNotFoundError"

# Event reasons
EVENT_REASON_RECONCILE_STARTED = "ReconcileStarted"
EVENT_REASON_RECONCILE_SUCCEEDED = "ReconcileSucceeded"
EVENT_REASON_RECONCILE_FAILED = "ReconcileFailed"
EVENT_REASON_BUCKET_CREATED = "BucketCreated"
EVENT_REASON_REGION_CONFLICT = "RegionConflict"
EVENT_REASON_FOLDER_CREATED = "FolderCreated"
EVENT_REASON_FOLDER_DELETED = "FolderDeleted"
EVENT_REASON_VALIDATE_SUCCEEDED = "ValidateSucceeded"
EVENT_REASON_VALIDATE_FAILED = "ValidateFailed"

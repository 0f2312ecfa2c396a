"""Error description and sanitization utilities."""

import re
from typing import Any

from botocore.exceptions import ClientError

# Patterns that might expose credentials in remote error messages
SENSITIVE_PATTERNS = [
    r"(access[_\s]?key[_\s]?id)[:=\s]+[A-Z0-9]{16,}",
    r"(secret[_\s]?access[_\s]?key)[:=\s]+[A-Za-z0-9/+=]{40}",
    r"(session[_\s]?token)[:=\s]+[A-Za-z0-9/+=]+",
    r"(X-Amz-Credential)=[^&\s]+",
    r"(X-Amz-Signature)=[^&\s]+",
]

# Fields to redact completely
SENSITIVE_FIELDS = {
    "access_key_id",
    "secret_access_key",
    "session_token",
    "password",
    "secret",
    "credentials",
}


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove credentials.

    Args:
        message: Original error message

    Returns:
        Message with credential values redacted
    """
    sanitized = message
    for pattern in SENSITIVE_PATTERNS:
        sanitized = re.sub(pattern, r"\1: [REDACTED]", sanitized, flags=re.IGNORECASE)
    return sanitized


def sanitize_exception(error: BaseException) -> str:
    """Sanitize an exception message to remove credentials."""
    return sanitize_error_message(str(error))


def describe_error(error: BaseException) -> str:
    """Describe an exception for a user-facing message.

    ClientErrors are reduced to their error code and message; anything else
    falls back to ``str(error)``. The result is sanitized.
    """
    if isinstance(error, ClientError):
        details = error.response.get("Error", {})
        code = details.get("Code", "Unknown")
        message = details.get("Message") or str(error)
        return sanitize_error_message(f"{code}: {message}")
    return sanitize_exception(error) or type(error).__name__


def error_code(error: BaseException) -> str | None:
    """Return the S3 error code of a ClientError, if any."""
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code")
    return None


def sanitize_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """Sanitize dictionary by redacting sensitive fields.

    Args:
        data: Dictionary to sanitize
        sensitive_keys: Additional keys to redact (merged with SENSITIVE_FIELDS)

    Returns:
        Sanitized dictionary with sensitive values redacted
    """
    all_sensitive = SENSITIVE_FIELDS | (sensitive_keys or set())
    sanitized: dict[str, Any] = {}

    for key, value in data.items():
        if key.lower() in all_sensitive:
            sanitized[key] = "[REDACTED]"
        elif isinstance(value, dict):
            sanitized[key] = sanitize_dict(value, sensitive_keys)
        elif isinstance(value, str):
            sanitized[key] = sanitize_error_message(value)
        else:
            sanitized[key] = value

    return sanitized


def format_bucket_error(bucket: str, action: str, error: BaseException) -> str:
    """Format a remote failure with its bucket context.

    Args:
        bucket: Bucket the failed call targeted
        action: What was being done, e.g. "applying tags to the bucket"
        error: Underlying exception

    Returns:
        Message such as ``[Bucket: b] Error: An unexpected error occurred while applying tags to the bucket. Details: ...``
    """
    return f"[Bucket: {bucket}] Error: An unexpected error occurred while {action}. Details: {describe_error(error)}"

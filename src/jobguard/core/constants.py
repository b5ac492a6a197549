"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# Audit retention is enforced by the storage layer (TTL index), never here
DEFAULT_AUDIT_RETENTION_DAYS = 90

# Request tracing
DEFAULT_CORRELATION_HEADER = "X-Request-ID"

# String field lengths
MAX_IPV6_LENGTH = 45
MAX_ACTION_LENGTH = 50
MAX_RESOURCE_TYPE_LENGTH = 50
MAX_RESOURCE_ID_LENGTH = 255
MAX_CORRELATION_ID_LENGTH = 64
MAX_STATUS_LENGTH = 20

# Permission keys are "resource:action"
PERMISSION_SEPARATOR = ":"

"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================

# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"

# Consistency Errors
ERROR_CODE_CONSTRAINT_VIOLATION = "CONSTRAINT_VIOLATION"
ERROR_CODE_OPERATION_CANCELLED = "OPERATION_CANCELLED"

# Storage Errors
ERROR_CODE_STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
ERROR_CODE_CONTENT_UPLOAD_FAILED = "CONTENT_UPLOAD_FAILED"
ERROR_CODE_CONTENT_FETCH_FAILED = "CONTENT_FETCH_FAILED"
ERROR_CODE_CONTENT_DELETE_FAILED = "CONTENT_DELETE_FAILED"

# Metadata / DynamoDB Errors
ERROR_CODE_METADATA_CREATE_FAILED = "METADATA_CREATE_FAILED"
ERROR_CODE_METADATA_FETCH_FAILED = "METADATA_FETCH_FAILED"
ERROR_CODE_METADATA_UPDATE_FAILED = "METADATA_UPDATE_FAILED"
ERROR_CODE_METADATA_DELETE_FAILED = "METADATA_DELETE_FAILED"
ERROR_CODE_METADATA_LIST_FAILED = "METADATA_LIST_FAILED"

# Image type catalogue Errors
ERROR_CODE_IMAGE_TYPE_OPERATION_FAILED = "IMAGE_TYPE_OPERATION_FAILED"

# ============================================================================
# Image Constraints
# ============================================================================

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB in bytes
MAX_FILE_NAME_LENGTH = 255
MAX_DESCRIPTION_LENGTH = 1000

MIME_TYPE_EXTENSION_MAP: Final[dict[str, tuple[str, ...]]] = {
    "image/jpeg": ("jpg", "jpeg"),
    "image/jpg": ("jpg", "jpeg"),
    "image/png": ("png",),
    "image/gif": ("gif",),
    "image/bmp": ("bmp",),
    "image/webp": ("webp",),
    "image/tiff": ("tif", "tiff"),
}

SUPPORTED_MIME_TYPES: Final[frozenset[str]] = frozenset(MIME_TYPE_EXTENSION_MAP.keys())

# ============================================================================
# Image Type Catalogue Constraints
# ============================================================================

MAX_IMAGE_TYPE_NAME_LENGTH = 100
MAX_IMAGE_TYPE_DESCRIPTION_LENGTH = 500
MAX_CATEGORY_NAME_LENGTH = 100
MAX_CATEGORY_DESCRIPTION_LENGTH = 500
MIN_PROBABILITY_WEIGHT = 0.0
MAX_PROBABILITY_WEIGHT = 1.0

# ============================================================================
# Pagination Constraints
# ============================================================================

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100

# ============================================================================
# DynamoDB Layout
# ============================================================================

RECORD_ID_KEY = "record_id"
RECORD_TYPE_METADATA = "metadata"
RECORD_TYPE_CONTENT_REF = "content_ref"
CONTENT_GUARD_PREFIX = "content#"
CLAIM_STATE_KEY = "claim_state"
CLAIM_PENDING = "pending"
CLAIM_COMMITTED = "committed"
RECORD_UPLOADED_INDEX = "record-uploaded-index"
MIME_UPLOADED_INDEX = "mime-uploaded-index"
IMAGE_TYPE_ID_KEY = "type_id"

# S3 Layout
CONTENT_KEY_PREFIX = "content/"
CONTENT_OBJECT_TYPE = "application/octet-stream"

# ============================================================================
# Cancellation
# ============================================================================

DEFAULT_CANCELLATION_MARGIN_MS = 1000

# ============================================================================
# Metrics
# ============================================================================

METRICS_NAMESPACE = "ImageStorage"

# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,PUT,PATCH,DELETE,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
EXPOSE_HEADERS = "Content-Type,Content-Length,X-Image-Metadata"
DEFAULT_CONTENT_TYPE = "application/json"
IMAGE_METADATA_HEADER = "X-Image-Metadata"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_IMAGE_S3_BUCKET_NAME = "IMAGE_S3_BUCKET_NAME"
ENV_IMAGE_METADATA_TABLE_NAME = "IMAGE_METADATA_TABLE_NAME"
ENV_IMAGE_TYPES_TABLE_NAME = "IMAGE_TYPES_TABLE_NAME"
ENV_CANCELLATION_MARGIN_MS = "CANCELLATION_MARGIN_MS"

# ============================================================================
# Helper Functions
# ============================================================================

def get_max_file_size_mb() -> int:
    """Get maximum file size in megabytes."""
    return MAX_FILE_SIZE // (1024 * 1024)

def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted file size string
    """
    size: float = float(size_bytes)

    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0

    return f"{size:.1f} TB"

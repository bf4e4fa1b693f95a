"""Constants for git-bin."""

# Project marker directory
GITBIN_DIR = ".git-bin"

# Configuration files (inside GITBIN_DIR)
CONFIG_FILE = "config.yaml"

# Environment overrides for credentials and transport
ENV_ACCESS_KEY = "GITBIN_ACCESS_KEY"
ENV_SECRET_KEY = "GITBIN_SECRET_KEY"
ENV_PROTOCOL = "GITBIN_PROTOCOL"

# Remote request tuning
REQUEST_TIMEOUT_SECONDS = 10 * 60
LIST_PAGE_SIZE = 250000  # Large enough that most buckets list in one round-trip
DOWNLOAD_ATTEMPTS = 3
DOWNLOAD_CHUNK_SIZE = 1024 * 1024

# S3 error codes with special handling
INVALID_ACCESS_KEY_ERROR_CODE = "InvalidAccessKeyId"
INVALID_SECURITY_ERROR_CODE = "InvalidSecurity"
SIGNATURE_MISMATCH_ERROR_CODE = "SignatureDoesNotMatch"
AUTH_ERROR_CODES = frozenset({
    INVALID_ACCESS_KEY_ERROR_CODE,
    INVALID_SECURITY_ERROR_CODE,
    SIGNATURE_MISMATCH_ERROR_CODE,
})
DIGEST_ERROR_CODES = frozenset({"InvalidDigest", "BadDigest"})
NOT_FOUND_ERROR_CODES = frozenset({"NoSuchKey", "404", "NotFound"})

# Version
GITBIN_VERSION = "0.1.0"

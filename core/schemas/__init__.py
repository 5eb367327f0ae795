"""
Schemas
File: __init__.py

Purpose: Export the public API for the schemas module: version constants,
canonical serialization, the error taxonomy and the public-values record.
"""

# Version constants
from .versioning import (
    SCHEMA_VERSION,
    SUPPORTED_SCHEMA_VERSIONS,
    UnsupportedSchemaVersionError,
    assert_supported_schema_version,
)

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
)

# Error models and exceptions
from .errors import (
    CanonicalizationException,
    EmptyInputException,
    ErrorCodes,
    IndexOutOfRangeException,
    MalformedRootException,
    MerkleError,
    MerkleException,
    MerkleVerificationException,
    SchemaValidationException,
)

# Output record
from .public_values import (
    PUBLIC_VALUES_SIZE,
    UINT32_MAX,
    UINT64_MAX,
    PublicValues,
    decode_public_values,
    encode_public_values,
    to_fixed_root,
)

__all__ = [
    # Versioning
    "SCHEMA_VERSION",
    "SUPPORTED_SCHEMA_VERSIONS",
    "UnsupportedSchemaVersionError",
    "assert_supported_schema_version",
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    # Errors
    "CanonicalizationException",
    "EmptyInputException",
    "ErrorCodes",
    "IndexOutOfRangeException",
    "MalformedRootException",
    "MerkleError",
    "MerkleException",
    "MerkleVerificationException",
    "SchemaValidationException",
    # Public values
    "PUBLIC_VALUES_SIZE",
    "UINT32_MAX",
    "UINT64_MAX",
    "PublicValues",
    "decode_public_values",
    "encode_public_values",
    "to_fixed_root",
]

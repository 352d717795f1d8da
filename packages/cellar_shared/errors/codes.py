"""Shared error code constants.

Cause codes produced by the shared normalizers. Cellar service codes
(``MUTATION_FAILED``, ``STORE_FAILED`` and the rest) live in the service and
keep the shared code they replace as ``cause_code`` metadata.
"""

VALIDATION_ERROR = "VALIDATION_ERROR"
NOT_FOUND = "NOT_FOUND"

CONFLICT = "CONFLICT"
ALREADY_EXISTS = "ALREADY_EXISTS"

DEPENDENCY_FAILURE = "DEPENDENCY_FAILURE"
DEPENDENCY_UNAVAILABLE = "DEPENDENCY_UNAVAILABLE"

INTERNAL_ERROR = "INTERNAL_ERROR"
UNEXPECTED_EXCEPTION = "UNEXPECTED_EXCEPTION"

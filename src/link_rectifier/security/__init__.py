"""File access policy and link path primitives."""

from .paths import PathBlockedError, exists_with_exact_case, resolve_link_target
from .policy import (
    PolicyBlockedError,
    SecurityLimits,
    enforce_file_access_policy,
    is_file_readable,
)

__all__ = [
    "PathBlockedError",
    "PolicyBlockedError",
    "SecurityLimits",
    "enforce_file_access_policy",
    "exists_with_exact_case",
    "is_file_readable",
    "resolve_link_target",
]

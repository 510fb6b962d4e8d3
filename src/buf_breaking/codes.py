"""Error code constants for buf_breaking failures.

These constants prevent stringly-typed error codes and let callers
branch on the failure category of a run.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Failure categories of a breaking-change run."""

    # Fatal (the run fails)
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    TOOL_NOT_FOUND = "TOOL_NOT_FOUND"
    UNSUPPORTED_VERSION = "UNSUPPORTED_VERSION"
    ANALYZER_EXECUTION_ERROR = "ANALYZER_EXECUTION_ERROR"
    ANNOTATION_PARSE_ERROR = "ANNOTATION_PARSE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Non-fatal (logged and discarded)
    COMMENT_POSTING_ERROR = "COMMENT_POSTING_ERROR"

"""Exception taxonomy for buf_breaking.

Every failure raised by this package derives from :class:`BufBreakingError`
and carries an :class:`ErrorCode`. Components raise; the orchestrator in
``buf_breaking.api`` is the one place that turns them into a failed run.
"""

from typing import Optional

from buf_breaking.codes import ErrorCode


class BufBreakingError(Exception):
    """Base class for all buf_breaking failures."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(BufBreakingError):
    """A required input is missing, empty, or inconsistent."""

    code = ErrorCode.CONFIGURATION_ERROR


class ToolNotFound(BufBreakingError):
    """The buf binary could not be located."""

    code = ErrorCode.TOOL_NOT_FOUND


class UnsupportedVersion(BufBreakingError):
    """The buf binary is older than the supported floor, or its version is unreadable."""

    code = ErrorCode.UNSUPPORTED_VERSION


class AnalyzerExecutionError(BufBreakingError):
    """buf ran but exited outside of its documented exit-code convention."""

    code = ErrorCode.ANALYZER_EXECUTION_ERROR

    def __init__(self, message: str, raw: str = "", exit_code: Optional[int] = None):
        super().__init__(message)
        self.raw = raw
        self.exit_code = exit_code


class AnnotationParseError(BufBreakingError):
    """buf produced output that is not a valid stream of file annotations."""

    code = ErrorCode.ANNOTATION_PARSE_ERROR

    def __init__(self, message: str, line_number: Optional[int] = None):
        super().__init__(message)
        self.line_number = line_number


class CommentPostingError(BufBreakingError):
    """Posting pull request comments failed. Never fatal."""

    code = ErrorCode.COMMENT_POSTING_ERROR


class InternalError(BufBreakingError):
    """Unexpected failure caught at the outermost boundary."""

    code = ErrorCode.INTERNAL_ERROR

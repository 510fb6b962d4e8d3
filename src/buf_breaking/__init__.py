"""buf_breaking: report buf breaking changes to GitHub pull requests."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("buf-breaking-action")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
from buf_breaking.api import run, run_breaking, RunOutcome
from buf_breaking.contracts import Annotation, AnalysisResult
from buf_breaking.codes import ErrorCode
from buf_breaking.kernel.incremental import filter_new

__all__ = [
    "__version__",
    "run",
    "run_breaking",
    "RunOutcome",
    "Annotation",
    "AnalysisResult",
    "ErrorCode",
    "filter_new",
]

"""Execution plumbing for the buf binary.

Locates buf, gates on its version, runs ``buf breaking`` and turns the
result into an :class:`AnalysisResult`. Subprocesses run without
``shell=True``; credentials reach buf only through the ``env`` passed to
each call, never through ``os.environ``.
"""

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import semver

from buf_breaking.contracts import AnalysisResult
from buf_breaking.errors import (
    AnalyzerExecutionError,
    ConfigurationError,
    ToolNotFound,
    UnsupportedVersion,
)
from buf_breaking._internal.wire import parse_annotations

logger = logging.getLogger(__name__)

# buf v0.41.0 introduced the FileAnnotation exit code, which is how a run
# with findings is told apart from a failed run.
MINIMUM_BUF_VERSION = "0.41.0"
FILE_ANNOTATION_EXIT_CODE = 100

BUF_NOT_INSTALLED_MESSAGE = (
    'buf is not installed; please add the "bufbuild/buf-setup-action" step to your job '
    "found at https://github.com/bufbuild/buf-setup-action"
)


@dataclass(frozen=True)
class CmdResult:
    exit_code: int
    command_str: str
    stdout: str
    stderr: str


def run_cmd(cmd: List[str], env: Optional[Mapping[str, str]] = None) -> CmdResult:
    """Run a subprocess and capture stdout/stderr.

    ``env`` is merged onto a copy of the current process environment.
    Never raises on non-zero exit codes.
    """
    child_env = None
    if env:
        child_env = os.environ.copy()
        child_env.update(env)

    logger.debug("Running %s", " ".join(cmd))
    proc = subprocess.run(cmd, text=True, capture_output=True, env=child_env)
    return CmdResult(
        exit_code=proc.returncode,
        command_str=" ".join(cmd),
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
    )


def resolve_binary(name: str = "buf", path: Optional[str] = None) -> str:
    """Locate the buf executable and return its path.

    An explicit ``path`` wins over ``PATH`` lookup.

    Raises:
        ToolNotFound: If no executable can be found
    """
    if path:
        candidate = Path(path)
        if candidate.is_file() and os.access(str(candidate), os.X_OK):
            return str(candidate)
        raise ToolNotFound(f"{BUF_NOT_INSTALLED_MESSAGE} (no executable at {path})")

    found = shutil.which(name)
    if not found:
        raise ToolNotFound(BUF_NOT_INSTALLED_MESSAGE)
    return found


def parse_version(text: str) -> semver.Version:
    """Parse ``buf --version`` output (e.g. ``1.28.1`` or ``v0.41.0``)."""
    cleaned = text.strip()
    if cleaned.startswith("v"):
        cleaned = cleaned[1:]
    try:
        return semver.Version.parse(cleaned)
    except (ValueError, TypeError):
        raise UnsupportedVersion(f"could not determine the buf version from {text.strip()!r}")


def detect_version(binary: str) -> semver.Version:
    """Ask buf for its version. Older releases print it to stderr."""
    res = run_cmd([binary, "--version"])
    return parse_version(res.stdout.strip() or res.stderr.strip())


def check_version(version: semver.Version, minimum: str = MINIMUM_BUF_VERSION) -> None:
    """
    Raises:
        UnsupportedVersion: If ``version`` is older than ``minimum``
    """
    if version.compare(minimum) < 0:
        raise UnsupportedVersion(f"buf must be at least version {minimum}, but found {version}")


def check_tool(path: Optional[str] = None) -> str:
    """Resolve buf and gate on its version. Returns the binary path."""
    binary = resolve_binary(path=path)
    version = detect_version(binary)
    logger.debug("Found buf %s at %s", version, binary)
    check_version(version)
    return binary


def run_breaking(
    binary: str,
    input: str,
    against: str,
    env: Optional[Mapping[str, str]] = None,
) -> AnalysisResult:
    """
    Run ``buf breaking`` for ``input`` against ``against``.

    Exit code 0 means no breaking changes; exit code 100 means the run
    succeeded and found annotations. Anything else is an execution error.

    Raises:
        ConfigurationError: If either reference is empty
        AnalyzerExecutionError: If buf exits outside its exit-code convention
        AnnotationParseError: If buf output cannot be parsed
    """
    if not input:
        raise ConfigurationError("an input was not provided")
    if not against:
        raise ConfigurationError("an against was not provided")

    res = run_cmd(
        [binary, "breaking", input, "--against", against, "--error-format", "json"],
        env=env,
    )
    if res.exit_code not in (0, FILE_ANNOTATION_EXIT_CODE):
        raw = "\n".join(part for part in (res.stdout.strip(), res.stderr.strip()) if part)
        raise AnalyzerExecutionError(
            f"buf breaking failed with exit code {res.exit_code}:\n{raw}",
            raw=raw,
            exit_code=res.exit_code,
        )

    annotations = parse_annotations(res.stdout)
    logger.debug("buf breaking against %s reported %d annotation(s)", against, len(annotations))
    return AnalysisResult(annotations=annotations, raw=res.stdout.strip(), exit_code=res.exit_code)


class BufRunner:
    """A resolved buf binary plus the environment every invocation gets."""

    def __init__(self, binary: str, env: Optional[Dict[str, str]] = None):
        self.binary = binary
        self.env = dict(env or {})

    @classmethod
    def create(cls, path: Optional[str] = None, env: Optional[Dict[str, str]] = None) -> "BufRunner":
        return cls(check_tool(path), env)

    def breaking(self, input: str, against: str) -> AnalysisResult:
        return run_breaking(self.binary, input, against, env=self.env)

"""Pytest configuration for tests.

No sys.path hacks - tests import from the installed buf_breaking package.
Every test runs with the GitHub Actions environment cleared so local
INPUT_* or RUNNER_* variables never leak into configuration.
"""

import io
import os
from typing import Dict, List, Optional, Tuple, Union

import pytest

from buf_breaking.config import ActionConfig, ActionInputs, RunnerContext
from buf_breaking.contracts import AnalysisResult, Annotation
from buf_breaking._internal.workflow import WorkflowCommands

_RUNNER_ENV = (
    "RUNNER_TEMP",
    "RUNNER_DEBUG",
    "GITHUB_OUTPUT",
    "GITHUB_EVENT_PATH",
    "GITHUB_REPOSITORY",
    "GITHUB_API_URL",
    "NETRC",
    "BUF_INPUT_HTTPS_USERNAME",
    "BUF_INPUT_HTTPS_PASSWORD",
)


@pytest.fixture(autouse=True)
def clean_actions_env(monkeypatch):
    """Remove Actions inputs and runner variables from the environment."""
    for key in list(os.environ):
        if key.upper().startswith("INPUT_") or key.upper() in _RUNNER_ENV:
            monkeypatch.delenv(key, raising=False)


class FakeRunner:
    """Stands in for BufRunner: canned results keyed by the against ref.

    A result that is an exception is raised instead of returned.
    """

    def __init__(self, results: Dict[str, Union[AnalysisResult, Exception]]):
        self.results = results
        self.calls: List[Tuple[str, str]] = []
        self.factory_calls: List[Tuple[Optional[str], Dict[str, str]]] = []

    def factory(self, path, env):
        """Runner factory that records the (buf_path, env) it was built with."""
        self.factory_calls.append((path, dict(env)))
        return self

    def breaking(self, input: str, against: str) -> AnalysisResult:
        self.calls.append((input, against))
        result = self.results[against]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def fake_runner():
    """Build a FakeRunner from a mapping of against ref to result."""
    return FakeRunner


@pytest.fixture
def make_annotation():
    def _make(**overrides) -> Annotation:
        fields = {
            "path": "a.proto",
            "start_line": 10,
            "start_column": 3,
            "type": "FIELD_REMOVED",
            "message": "field removed",
        }
        fields.update(overrides)
        return Annotation(**fields)
    return _make


@pytest.fixture
def make_config(tmp_path):
    """Build an ActionConfig whose RUNNER_TEMP and GITHUB_OUTPUT live in tmp_path."""
    def _make(**inputs) -> ActionConfig:
        runner = RunnerContext(
            runner_temp=str(tmp_path),
            github_output=str(tmp_path / "github_output"),
        )
        return ActionConfig(inputs=ActionInputs(**inputs), runner=runner)
    return _make


@pytest.fixture
def read_outputs():
    """Parse a GITHUB_OUTPUT file written with heredoc delimiters."""
    def _read(path) -> Dict[str, str]:
        outputs: Dict[str, str] = {}
        lines = path.read_text(encoding="utf-8").splitlines()
        i = 0
        while i < len(lines):
            name, delimiter = lines[i].split("<<", 1)
            value_lines = []
            i += 1
            while lines[i] != delimiter:
                value_lines.append(lines[i])
                i += 1
            outputs[name] = "\n".join(value_lines)
            i += 1
        return outputs
    return _read


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def emitter(stream, tmp_path):
    return WorkflowCommands(stream=stream, output_path=str(tmp_path / "github_output"))

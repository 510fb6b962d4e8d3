"""Public API for buf_breaking package.

High-level functions that run a complete breaking-change check and return
structured results. The CLI and the GitHub Action both go through here.
"""

import logging
from typing import Callable, Dict, List, Optional, Protocol

from pydantic import BaseModel, Field

from buf_breaking.codes import ErrorCode
from buf_breaking.comments import PullRequestCommentPoster, post_best_effort
from buf_breaking.config import ActionConfig, load_config
from buf_breaking.contracts import AnalysisResult, Annotation
from buf_breaking.errors import BufBreakingError, InternalError
from buf_breaking.kernel.incremental import count_suppressed, filter_new
from buf_breaking.reporter import Reporter
from buf_breaking._internal.credentials import build_env
from buf_breaking._internal.invoker import BufRunner
from buf_breaking._internal.workflow import WorkflowCommands

logger = logging.getLogger(__name__)


class Runner(Protocol):
    def breaking(self, input: str, against: str) -> AnalysisResult:
        ...


RunnerFactory = Callable[[Optional[str], Dict[str, str]], Runner]
PosterFactory = Callable[[ActionConfig], Optional[PullRequestCommentPoster]]


class RunOutcome(BaseModel):
    """Stable result model of one run."""
    ok: bool
    message: str  # Summary on success/findings, error message on failure
    annotations: List[Annotation] = Field(default_factory=list)  # Reported (post-filter) annotations
    incremental: bool = False
    error_code: Optional[ErrorCode] = None


def _default_runner(path: Optional[str], env: Dict[str, str]) -> Runner:
    return BufRunner.create(path=path, env=env)


def default_comment_poster(config: ActionConfig) -> Optional[PullRequestCommentPoster]:
    """Poster for the triggering pull request, or None when comments cannot be posted."""
    inputs, runner = config.inputs, config.runner
    if not inputs.comment:
        return None
    number = runner.pull_request_number()
    commit_id = runner.pull_request_head_sha()
    if not inputs.github_token or not runner.github_repository or number is None or commit_id is None:
        logger.debug("Skipping pull request comments: not a pull request event or no github_token")
        return None
    return PullRequestCommentPoster(
        token=inputs.github_token,
        repository=runner.github_repository,
        pull_request_number=number,
        commit_id=commit_id,
        api_url=runner.github_api_url,
    )


def run_breaking(
    config: ActionConfig,
    runner_factory: RunnerFactory = _default_runner,
    emitter: Optional[WorkflowCommands] = None,
    poster_factory: PosterFactory = default_comment_poster,
) -> RunOutcome:
    """
    Run buf breaking and report the results.

    Steps: validate inputs, locate and version-check buf, run against
    ``against``, optionally run against ``since`` and keep only the new
    changes, then report.

    Args:
        config: Inputs and runner context
        runner_factory: Builds the buf runner from (buf_path, env); raises on a
            missing or too old binary
        emitter: Workflow command sink (defaults to stdout + GITHUB_OUTPUT)
        poster_factory: Builds the optional pull request comment poster; its
            failures are logged and never change the outcome

    Returns:
        RunOutcome; ``ok`` is False on failure or when breaking changes remain
    """
    if emitter is None:
        emitter = WorkflowCommands(output_path=config.runner.github_output)
    reporter = Reporter(emitter)
    inputs = config.inputs
    incremental = config.incremental

    try:
        config.validate()
        for secret in (inputs.buf_token, inputs.buf_input_https_password, inputs.github_token):
            if secret:
                emitter.add_mask(secret)
        env = build_env(
            buf_token=inputs.buf_token,
            https_username=inputs.buf_input_https_username,
            https_password=inputs.buf_input_https_password,
            runner_temp=config.runner.runner_temp,
        )
        runner = runner_factory(inputs.buf_path, env)

        result = runner.breaking(inputs.input, inputs.against)
        annotations = list(result.annotations)
        if incremental:
            baseline = runner.breaking(inputs.input, inputs.since)
            suppressed = count_suppressed(annotations, baseline.annotations)
            annotations = filter_new(annotations, baseline.annotations)
            logger.debug("%d annotation(s) already present against %s", suppressed, inputs.since)
            if suppressed:
                emitter.info(
                    f"{suppressed} breaking change(s) already present against {inputs.since} were not reported."
                )
    except BufBreakingError as e:
        logger.debug("Run failed with %s", e.code.value)
        return RunOutcome(ok=False, message=e.message, incremental=incremental, error_code=e.code)

    message = reporter.report(annotations, incremental=incremental)
    if annotations:
        # Raw output covers every finding against ``against``, suppressed ones included.
        title = f"buf output (against {inputs.against}, unfiltered)" if incremental else "buf output"
        reporter.report_raw(result.raw, title=title)
        post_best_effort(poster_factory, config, annotations, log=emitter.info)

    return RunOutcome(
        ok=not annotations,
        message=message,
        annotations=annotations,
        incremental=incremental,
    )


def run(
    config: Optional[ActionConfig] = None,
    runner_factory: RunnerFactory = _default_runner,
    emitter: Optional[WorkflowCommands] = None,
    poster_factory: PosterFactory = default_comment_poster,
) -> int:
    """
    Outermost boundary: run and translate the outcome into an exit code.

    Any exception that escapes :func:`run_breaking` marks the run failed, so
    an unexpected error never passes as success.

    Returns:
        0 on success, 1 on failure
    """
    try:
        if config is None:
            config = load_config()
        if emitter is None:
            emitter = WorkflowCommands(output_path=config.runner.github_output)
        outcome = run_breaking(
            config,
            runner_factory=runner_factory,
            emitter=emitter,
            poster_factory=poster_factory,
        )
    except BufBreakingError as e:
        (emitter or WorkflowCommands()).set_failed(e.message)
        return 1
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        error = InternalError(str(e) or "Internal error")
        (emitter or WorkflowCommands()).set_failed(error.message)
        return 1

    if not outcome.ok:
        emitter.set_failed(outcome.message)
        return 1
    return 0

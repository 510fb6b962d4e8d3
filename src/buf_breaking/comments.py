"""Best-effort pull request comments.

Findings can also be posted on the pull request. This is a side channel:
its failures are logged and discarded, and never change the outcome of the
run.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence

import httpx

from buf_breaking.contracts import Annotation
from buf_breaking.errors import CommentPostingError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


def comment_body(annotation: Annotation) -> str:
    return f"**{annotation.type}**: {annotation.message}"


def _first_line(error: Exception) -> str:
    lines = str(error).splitlines()
    return lines[0] if lines else type(error).__name__


@dataclass
class PostSummary:
    """Counts of one batch of comments."""
    posted: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.errors)

    @property
    def total(self) -> int:
        return self.posted + self.failed


class PullRequestCommentPoster:
    """Posts annotations on one pull request through the GitHub REST API."""

    def __init__(
        self,
        token: str,
        repository: str,
        pull_request_number: int,
        commit_id: str,
        api_url: str = "https://api.github.com",
        transport: Optional[httpx.BaseTransport] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.repository = repository
        self.pull_request_number = pull_request_number
        self.commit_id = commit_id
        self._http = httpx.Client(
            base_url=api_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
            },
            timeout=timeout_seconds,
            transport=transport,
        )

    def __enter__(self) -> "PullRequestCommentPoster":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def post(self, annotations: Sequence[Annotation]) -> PostSummary:
        """
        Post one comment per annotation.

        Located annotations become review comments on the changed line;
        unlocated ones become plain conversation comments. A failed request
        (e.g. a 422 for a line outside the diff) does not stop the rest.
        """
        summary = PostSummary()
        for annotation in annotations:
            if annotation.is_located:
                url = f"/repos/{self.repository}/pulls/{self.pull_request_number}/comments"
                payload = {
                    "body": comment_body(annotation),
                    "commit_id": self.commit_id,
                    "path": annotation.path,
                    "line": annotation.start_line,
                    "side": "RIGHT",
                }
            else:
                url = f"/repos/{self.repository}/issues/{self.pull_request_number}/comments"
                payload = {"body": comment_body(annotation)}
            try:
                response = self._http.post(url, json=payload)
                response.raise_for_status()
            except (httpx.HTTPStatusError, httpx.RequestError) as e:
                logger.debug("Comment for %s failed: %s", annotation.type, e)
                summary.errors.append(_first_line(e))
                continue
            summary.posted += 1
        return summary


def post_best_effort(
    poster_factory: Callable[[Any], Optional[PullRequestCommentPoster]],
    config: Any,
    annotations: Sequence[Annotation],
    log: Optional[Callable[[str], None]] = None,
) -> bool:
    """
    Build a poster and post comments. Nothing raised here escapes.

    Any failure, while building the poster or while posting, becomes a
    :class:`CommentPostingError` that is logged and discarded.

    Args:
        poster_factory: Builds the poster from ``config``; None skips comments
        config: Passed to ``poster_factory``
        annotations: Annotations to post
        log: User-facing log sink (e.g. ``WorkflowCommands.info``)

    Returns:
        True if every comment was posted
    """
    try:
        poster = poster_factory(config)
        if poster is None:
            return False
        with poster:
            summary = poster.post(annotations)
    except Exception as e:
        error = CommentPostingError(f"Failed to write comments in-line: {_first_line(e)}")
    else:
        if not summary.failed:
            logger.debug("Posted %d pull request comment(s)", summary.posted)
            return True
        error = CommentPostingError(
            f"Failed to write comments in-line: {summary.failed} of {summary.total} failed "
            f"(first error: {summary.errors[0]})"
        )
    logger.warning("%s", error.message)
    if log is not None:
        log(error.message)
    return False

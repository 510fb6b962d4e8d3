"""Render breaking changes as workflow annotations and the ``results`` output."""

from typing import Optional, Sequence

from buf_breaking.contracts import Annotation
from buf_breaking._internal.canonical_json import dumps_annotations
from buf_breaking._internal.workflow import WorkflowCommands

RESULTS_OUTPUT = "results"


def summary_message(count: int, incremental: bool) -> str:
    """One-line summary of a run that found ``count`` breaking changes."""
    qualifier = "new " if incremental else ""
    if count == 0:
        return f"No {qualifier}breaking changes were found."
    return f"found {count} {qualifier}breaking changes."


class Reporter:
    """Emits one diagnostic per annotation plus the structured output."""

    def __init__(self, emitter: Optional[WorkflowCommands] = None):
        self.emitter = emitter or WorkflowCommands()

    def emit_annotation(self, annotation: Annotation) -> None:
        if annotation.is_located:
            self.emitter.error(
                annotation.message,
                file=annotation.path,
                line=annotation.start_line,
                col=annotation.start_column,
                endLine=annotation.end_line,
                endColumn=annotation.end_column,
                title=annotation.type,
            )
        else:
            self.emitter.error(annotation.message, title=annotation.type)

    def report(self, annotations: Sequence[Annotation], incremental: bool = False) -> str:
        """
        Emit diagnostics and the ``results`` output, and return the summary.

        The output is written even when there are no annotations, so
        downstream steps always see a JSON array.
        """
        for annotation in annotations:
            self.emit_annotation(annotation)
        self.emitter.set_output(RESULTS_OUTPUT, dumps_annotations(annotations))

        message = summary_message(len(annotations), incremental)
        if not annotations:
            self.emitter.info(message)
        return message

    def report_raw(self, raw: str, title: str = "buf output") -> None:
        """Print raw analyzer output in a collapsed log group."""
        if not raw:
            return
        self.emitter.group(title)
        self.emitter.info(raw)
        self.emitter.end_group()

"""GitHub Actions workflow commands.

The runner reads ``::command key=value,...::message`` lines from stdout.
Outputs go to the file named by ``GITHUB_OUTPUT`` when the runner provides
one.
"""

import os
import sys
import uuid
from pathlib import Path
from typing import Dict, Optional, TextIO


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def format_command(command: str, message: str = "", properties: Optional[Dict[str, object]] = None) -> str:
    """Render one workflow command line. ``None`` properties are omitted."""
    props = ",".join(
        f"{key}={escape_property(str(value))}"
        for key, value in (properties or {}).items()
        if value is not None
    )
    head = f"::{command} {props}" if props else f"::{command}"
    return f"{head}::{escape_data(message)}"


class WorkflowCommands:
    """Emitter for workflow commands and step outputs."""

    def __init__(self, stream: Optional[TextIO] = None, output_path: Optional[str] = None):
        self._stream = stream
        self.output_path = output_path if output_path is not None else os.environ.get("GITHUB_OUTPUT")
        self.failed = False

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so pytest's capsys sees the output.
        return self._stream if self._stream is not None else sys.stdout

    def _write(self, line: str) -> None:
        print(line, file=self.stream)

    def info(self, message: str) -> None:
        self._write(message)

    def debug(self, message: str) -> None:
        self._write(format_command("debug", message))

    def error(self, message: str, **properties: object) -> None:
        self._write(format_command("error", message, properties))

    def add_mask(self, secret: str) -> None:
        if secret:
            self._write(format_command("add-mask", secret))

    def group(self, title: str) -> None:
        self._write(format_command("group", title))

    def end_group(self) -> None:
        self._write(format_command("endgroup"))

    def set_output(self, name: str, value: str) -> None:
        if self.output_path:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            with Path(self.output_path).open("a", encoding="utf-8") as f:
                f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        else:
            self._write(format_command("set-output", value, {"name": name}))

    def set_failed(self, message: str) -> None:
        self.failed = True
        self.error(message)

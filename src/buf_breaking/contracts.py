"""Public result models for buf_breaking package."""

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Annotation(BaseModel):
    """One breaking change reported by buf."""
    path: Optional[str] = None  # Schema file, relative to the input root
    start_line: Optional[int] = Field(default=None, ge=1)  # 1-based
    start_column: Optional[int] = Field(default=None, ge=1)  # 1-based
    end_line: Optional[int] = Field(default=None, ge=1)
    end_column: Optional[int] = Field(default=None, ge=1)
    type: str  # buf rule id, e.g. "FIELD_NO_DELETE"
    message: str

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def _check_location(self) -> "Annotation":
        location = (self.path, self.start_line, self.start_column)
        present = [value is not None for value in location]
        if any(present) and not all(present):
            raise ValueError(
                "path, start_line and start_column must be all present or all absent"
            )
        if not all(present) and (self.end_line is not None or self.end_column is not None):
            raise ValueError("end_line/end_column require a located annotation")
        return self

    @property
    def kind(self) -> str:
        """Category of the incompatibility."""
        return self.type

    @property
    def is_located(self) -> bool:
        return self.path is not None

    @property
    def identity(self) -> Tuple[Optional[str], str, str]:
        """Key that survives line shifts between two snapshots of a schema."""
        return (self.path, self.type, self.message)

    def to_output(self) -> dict:
        """JSON-ready dict with absent positions omitted."""
        return self.model_dump(exclude_none=True)


class AnalysisResult(BaseModel):
    """Outcome of one ``buf breaking`` invocation."""
    annotations: List[Annotation] = Field(default_factory=list)  # emission order
    raw: str = ""  # analyzer stdout, trimmed
    exit_code: int = 0

    model_config = ConfigDict(frozen=True)

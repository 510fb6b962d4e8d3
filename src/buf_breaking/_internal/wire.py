"""Parser for ``buf breaking --error-format json`` output.

buf writes one JSON object per line, one per FileAnnotation. Go's
``omitempty`` drops zero-valued fields, so an unlocated annotation simply
has no ``path``/``start_line``/``start_column`` keys.

Records are validated here, at the parse boundary. A malformed line is an
:class:`AnnotationParseError`; nothing is dropped silently.
"""

import json
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from buf_breaking.contracts import Annotation
from buf_breaking.errors import AnnotationParseError


class BufFileAnnotation(BaseModel):
    """Wire shape of one buf FileAnnotation."""
    path: Optional[str] = None
    start_line: Optional[int] = Field(default=None, ge=1)
    start_column: Optional[int] = Field(default=None, ge=1)
    end_line: Optional[int] = Field(default=None, ge=1)
    end_column: Optional[int] = Field(default=None, ge=1)
    type: str = Field(min_length=1)
    message: str

    model_config = ConfigDict(extra="ignore")  # buf may add fields in later releases

    def to_annotation(self) -> Annotation:
        return Annotation(**self.model_dump())


def parse_annotation_line(line: str, line_number: int) -> Annotation:
    """
    Parse a single line of buf JSON output.

    Raises:
        AnnotationParseError: If the line is not a valid FileAnnotation object
    """
    try:
        obj = json.loads(line)
    except json.JSONDecodeError as e:
        raise AnnotationParseError(
            f"buf output line {line_number} is not valid JSON: {e}",
            line_number=line_number,
        )
    if not isinstance(obj, dict):
        raise AnnotationParseError(
            f"buf output line {line_number} is not a JSON object",
            line_number=line_number,
        )
    try:
        return BufFileAnnotation(**obj).to_annotation()
    except ValidationError as e:
        record_type = obj.get("type")
        described = f" ({record_type})" if isinstance(record_type, str) and record_type else ""
        raise AnnotationParseError(
            f"buf output line {line_number}{described} is not a valid file annotation: {e}",
            line_number=line_number,
        )


def parse_annotations(output: str) -> List[Annotation]:
    """Parse all annotations from buf stdout, in emission order. Blank lines are skipped."""
    annotations: List[Annotation] = []
    for index, line in enumerate(output.splitlines(), start=1):
        if not line.strip():
            continue
        annotations.append(parse_annotation_line(line, index))
    return annotations

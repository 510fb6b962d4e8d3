"""Tests for parsing buf JSON output."""

import json

import pytest

from buf_breaking.contracts import Annotation
from buf_breaking.errors import AnnotationParseError
from buf_breaking._internal.wire import parse_annotation_line, parse_annotations


def _line(**fields) -> str:
    return json.dumps(fields)


def test_parses_records_in_emission_order():
    output = "\n".join([
        _line(path="b.proto", start_line=3, start_column=1, end_line=3, end_column=9,
              type="FIELD_NO_DELETE", message='Previously present field "2" was deleted.'),
        _line(type="PACKAGE_NO_DELETE", message='Previously present package "foo.v1" was deleted.'),
        _line(path="a.proto", start_line=1, start_column=1, type="FILE_SAME_PACKAGE", message="m"),
    ])
    annotations = parse_annotations(output)
    assert [a.path for a in annotations] == ["b.proto", None, "a.proto"]
    assert annotations[0] == Annotation(
        path="b.proto", start_line=3, start_column=1, end_line=3, end_column=9,
        type="FIELD_NO_DELETE", message='Previously present field "2" was deleted.',
    )
    assert not annotations[1].is_located


def test_empty_output_and_blank_lines():
    assert parse_annotations("") == []
    output = "\n" + _line(type="T", message="m") + "\n   \n"
    assert len(parse_annotations(output)) == 1


def test_unknown_fields_are_ignored():
    annotation = parse_annotation_line(_line(type="T", message="m", severity="error"), 1)
    assert annotation == Annotation(type="T", message="m")


def test_invalid_json_names_the_line():
    output = _line(type="T", message="m") + "\nnot json"
    with pytest.raises(AnnotationParseError) as excinfo:
        parse_annotations(output)
    assert excinfo.value.line_number == 2
    assert "line 2" in excinfo.value.message


def test_non_object_is_rejected():
    with pytest.raises(AnnotationParseError):
        parse_annotation_line("[1, 2]", 1)


@pytest.mark.parametrize(
    "fields",
    [
        {"message": "missing type"},
        {"type": "T"},
        {"type": "", "message": "empty type"},
        {"path": "a.proto", "type": "T", "message": "no position"},
        {"path": "a.proto", "start_line": 0, "start_column": 0, "type": "T", "message": "zero"},
    ],
)
def test_malformed_records_are_rejected(fields):
    with pytest.raises(AnnotationParseError):
        parse_annotation_line(json.dumps(fields), 7)


def test_rejected_record_names_its_type():
    line = _line(path="a.proto", type="FILE_NO_DELETE", message="file removed")
    with pytest.raises(AnnotationParseError) as excinfo:
        parse_annotations("\n" + line)
    assert excinfo.value.line_number == 2
    assert excinfo.value.message.startswith("buf output line 2 (FILE_NO_DELETE) is not a valid file annotation")


def test_rejected_record_without_type():
    with pytest.raises(AnnotationParseError) as excinfo:
        parse_annotation_line(_line(message="missing type"), 4)
    assert excinfo.value.message.startswith("buf output line 4 is not a valid file annotation")

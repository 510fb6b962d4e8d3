"""Tests for incremental filtering of breaking changes."""

from buf_breaking.kernel.incremental import count_suppressed, filter_new

def test_empty_baseline_is_identity(make_annotation):
    current = [
        make_annotation(),
        make_annotation(path="b.proto", type="FIELD_TYPE_CHANGED", message="type changed"),
        make_annotation(path=None, start_line=None, start_column=None, message="package removed"),
    ]
    assert filter_new(current, []) == current


def test_empty_current_gives_empty_result(make_annotation):
    assert filter_new([], [make_annotation()]) == []


def test_everything_in_baseline_is_suppressed(make_annotation):
    current = [
        make_annotation(),
        make_annotation(path="b.proto", message="other"),
    ]
    baseline = list(reversed(current)) + [make_annotation(path="c.proto")]
    assert filter_new(current, baseline) == []


def test_location_is_ignored(make_annotation):
    current = [make_annotation(start_line=10, start_column=3, end_line=10, end_column=20)]
    baseline = [make_annotation(start_line=5, start_column=1)]
    assert filter_new(current, baseline) == []


def test_path_type_and_message_each_matter(make_annotation):
    baseline = [make_annotation()]
    assert filter_new([make_annotation(path="b.proto")], baseline) == [make_annotation(path="b.proto")]
    assert filter_new([make_annotation(type="FIELD_NO_DELETE")], baseline) == [
        make_annotation(type="FIELD_NO_DELETE")
    ]
    assert filter_new([make_annotation(message="different")], baseline) == [
        make_annotation(message="different")
    ]


def test_unlocated_annotations_match_on_type_and_message(make_annotation):
    unlocated = make_annotation(path=None, start_line=None, start_column=None)
    assert filter_new([unlocated], [unlocated]) == []
    # A located finding with the same text is a different finding.
    assert filter_new([unlocated], [make_annotation()]) == [unlocated]


def test_order_of_survivors_is_preserved(make_annotation):
    a = make_annotation(path="a.proto")
    b = make_annotation(path="b.proto")
    c = make_annotation(path="c.proto")
    d = make_annotation(path="d.proto")
    assert filter_new([d, a, c, b], [c]) == [d, a, b]


def test_duplicates_are_judged_independently(make_annotation):
    dup = make_annotation()
    other = make_annotation(path="b.proto")
    assert filter_new([dup, other, dup], []) == [dup, other, dup]
    assert filter_new([dup, other, dup], [dup]) == [other]


def test_inputs_are_not_mutated(make_annotation):
    current = [make_annotation(), make_annotation(path="b.proto")]
    baseline = [make_annotation()]
    current_before = list(current)
    baseline_before = list(baseline)

    result = filter_new(current, baseline)

    assert current == current_before
    assert baseline == baseline_before
    assert result is not current


def test_count_suppressed(make_annotation):
    current = [make_annotation(), make_annotation(path="b.proto"), make_annotation()]
    assert count_suppressed(current, [make_annotation(start_line=1)]) == 2
    assert count_suppressed(current, []) == 0

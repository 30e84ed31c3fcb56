"""
Tests for Proofread Differ
==========================
Tests for line alignment, classification of source lines and the
properties every comparison must satisfy.
"""

import pytest

from proofread_compare.differ import (
    ProofreadDiffer,
    compare_side_by_side,
    compare_texts,
    compute_differences,
)
from proofread_compare.models import OffsetRange, WordDiff, WordDiffKind
from proofread_compare.segmenter import split_lines


@pytest.fixture
def original_code() -> str:
    """Function before the rewrite."""
    return """function calculateTotal(items) {
  let total = 0;
  for (let i = 0; i < items.length; i++) {
    total += items[i];
  }
  return total;
}"""


@pytest.fixture
def revised_code() -> str:
    """Function after the rewrite."""
    return """function calculateTotal(items) {
  let sum = 0;
  for (const item of items) {
    sum += item;
  }
  return sum;
}"""


PAIRS = [
    ("The cat sat.", "The dog sat."),
    ("keep\ndrop me", "keep"),
    ("alpha\nbeta\n\ngamma delta", "beta\nalpha\ngamma epsilon"),
    ("let total = price * qty;\nreturn total;", "let sum = price * qty;\nreturn sum;"),
    ("\U0001F600 cat\nok", "\U0001F600 dog\nok"),
    ("", "something"),
    ("a\r\nb", "a\nb"),
]


def _spans(line_diff):
    return [(d.range.location, d.range.length) for d in line_diff.word_diffs]


class TestProperties:
    """Properties that hold for every comparison."""

    @pytest.mark.parametrize("text", [
        "The cat sat.\nThe dog ran.",
        "a\n\nb\n",
        "let total = 0;\nfor (const x of xs) {\n  total += x;\n}",
        "",
        "\U0001F44D\U0001F44D",
    ])
    def test_identity(self, text):
        """A text compared with itself has no differences."""
        line_diffs = compute_differences(text, text)
        assert len(line_diffs) == len(split_lines(text))
        assert all(not d.is_different and d.word_diffs == [] for d in line_diffs)

    @pytest.mark.parametrize("source,target", PAIRS)
    def test_coverage(self, source, target):
        """One LineDiff per source line, numbered without gaps."""
        line_diffs = compute_differences(source, target)
        assert [d.line_number for d in line_diffs] == list(range(len(split_lines(source))))

    @pytest.mark.parametrize("source,target", PAIRS)
    def test_containment_and_ordering(self, source, target):
        """Word diffs lie within their line and are ordered by start."""
        for line_diff in compute_differences(source, target):
            locations = [d.range.location for d in line_diff.word_diffs]
            assert locations == sorted(locations)
            assert all(line_diff.range.contains(d.range) for d in line_diff.word_diffs)
            assert line_diff.is_different == bool(line_diff.word_diffs)

    def test_code_rewrite_properties(self, original_code, revised_code):
        """The properties hold on a multi-line code rewrite."""
        line_diffs = compute_differences(original_code, revised_code)
        assert len(line_diffs) == 7
        for line_diff in line_diffs:
            assert all(line_diff.range.contains(d.range) for d in line_diff.word_diffs)
        assert not line_diffs[0].is_different
        assert not line_diffs[-1].is_different

    def test_inputs_not_mutated(self):
        """The differ keeps the caller's buffers as given."""
        source, target = "The cat sat.", "The dog sat."
        differ = ProofreadDiffer(source, target)
        differ.compute_differences()
        assert differ.source_text == "The cat sat."
        assert differ.target_text == "The dog sat."


class TestScenarios:
    """End-to-end scenarios."""

    def test_prose_single_word_edit(self):
        """Only the replaced word is marked."""
        line_diffs = compute_differences("The cat sat.", "The dog sat.")
        assert len(line_diffs) == 1
        assert line_diffs[0].is_different
        assert line_diffs[0].word_diffs == [WordDiff(OffsetRange(4, 3), WordDiffKind.MODIFICATION)]

    def test_pure_deletion(self):
        """A line with no similar target line is deleted whole."""
        line_diffs = compute_differences("keep\ndrop me", "keep")
        assert not line_diffs[0].is_different
        assert line_diffs[1].word_diffs == [WordDiff(OffsetRange(5, 7), WordDiffKind.DELETION)]
        assert line_diffs[1].status == 'deleted'

    def test_reordered_lines_unchanged(self):
        """A line found verbatim anywhere in the target is unchanged."""
        line_diffs = compute_differences("alpha\nbeta", "beta\nalpha")
        assert all(not d.is_different for d in line_diffs)

    def test_duplicate_lines(self):
        """Every copy of a surviving line is unchanged."""
        line_diffs = compute_differences("a\nb\na", "a")
        assert [d.status for d in line_diffs] == ['unchanged', 'deleted', 'unchanged']

    def test_renamed_variable(self):
        """The rename is marked by both the token pass and the rule."""
        line_diffs = compute_differences("let total = price * qty;", "let sum = price * qty;")
        assert _spans(line_diffs[0]) == [(4, 5), (4, 5)]
        assert line_diffs[0].status == 'modified'

    def test_counted_loop_rewrite(self):
        """The loop header span is added to the token diffs."""
        source = "for (let i = 0; a.b.c.d.e) { foo(bar, baz, qux); }"
        target = "for (const item of a.b.c.d.e) { foo(bar, baz, qux); }"
        line_diff = compute_differences(source, target)[0]
        header = WordDiff(OffsetRange(0, source.index('{')), WordDiffKind.MODIFICATION)
        assert header in line_diff.word_diffs
        assert (5, 3) in _spans(line_diff)

    def test_utf16_offsets(self):
        """Spans after astral characters use UTF-16 offsets."""
        line_diffs = compute_differences("\U0001F600 cat\nok", "\U0001F600 dog\nok")
        assert _spans(line_diffs[0]) == [(3, 3)]
        assert line_diffs[1].range == OffsetRange(7, 2)
        assert not line_diffs[1].is_different

    def test_empty_source(self):
        """An empty source still yields one line."""
        assert compute_differences("", "")[0].word_diffs == []
        line_diffs = compute_differences("", "abc")
        assert len(line_diffs) == 1
        assert line_diffs[0].status == 'deleted'

    def test_empty_line_against_whitespace_line(self):
        """A blank line does not pair with a whitespace-only line."""
        line_diff = compute_differences("alpha\n\nbeta", "alpha\n   \nbeta")[1]
        assert line_diff.is_different
        assert line_diff.word_diffs == [WordDiff(OffsetRange(6, 0), WordDiffKind.DELETION)]

    def test_literal_loop_rewrite_is_deleted(self):
        """A full loop rewrite scores below the code threshold and is deleted whole."""
        source = "for (let i = 0; i < items.length; i++) { sum += items[i]; }"
        target = "for (const item of items) { sum += item; }"
        line_diff = compute_differences(source, target)[0]
        assert line_diff.word_diffs == [WordDiff(OffsetRange(0, len(source)), WordDiffKind.DELETION)]
        assert len(source) == 59

    def test_empty_target(self):
        """Every source line is deleted against an empty target."""
        line_diffs = compute_differences("abc", "")
        assert line_diffs[0].word_diffs == [WordDiff(OffsetRange(0, 3), WordDiffKind.DELETION)]


class TestThresholds:
    """Tests for the match threshold boundary."""

    def test_code_exactly_at_threshold_is_modified(self):
        """Similarity of exactly 0.5 pairs code lines."""
        line_diff = compute_differences("a = b;", "a = c;")[0]
        assert line_diff.word_diffs == [WordDiff(OffsetRange(4, 1), WordDiffKind.MODIFICATION)]

    def test_code_below_threshold_is_deleted(self):
        """Dissimilar code lines are deleted."""
        line_diff = compute_differences("a = b;", "c = d;")[0]
        assert line_diff.word_diffs == [WordDiff(OffsetRange(0, 6), WordDiffKind.DELETION)]

    def test_prose_exactly_at_threshold_is_modified(self):
        """Similarity of exactly 0.3 pairs prose lines."""
        line_diff = compute_differences(
            "one two three alpha beta gamma",
            "one two three delta epsilon zeta eta"
        )[0]
        assert _spans(line_diff) == [(14, 5), (20, 4), (25, 5)]
        assert line_diff.status == 'modified'


class TestProofreadDiffer:
    """Tests for ProofreadDiffer internals."""

    def test_content_type_fixed_by_source(self):
        """The source buffer alone decides the content type."""
        assert ProofreadDiffer("The cat sat.", "x = foo(y);").content_type == 'prose'
        assert ProofreadDiffer("x = foo(y);", "The cat sat.").content_type == 'code'

    def test_best_match_first_maximum_wins(self):
        """Ties go to the earliest target line."""
        differ = ProofreadDiffer("the cat", "")
        assert differ.find_best_match("the cat", ["cat the", "the cat"]) == ("cat the", 1.0)

    def test_best_match_below_threshold(self):
        """Nothing is returned when no line clears the threshold."""
        differ = ProofreadDiffer("the cat", "")
        assert differ.find_best_match("the cat", ["a dog", "some bird"]) is None

    @pytest.mark.parametrize("source,target", PAIRS)
    def test_fuzzy_branch_independent_of_line_diff(self, source, target):
        """Changed lines match the fuzzy result whether or not the line diff flagged them."""
        differ = ProofreadDiffer(source, target)
        target_texts = [line.text for line in differ.target_lines]
        for line, line_diff in zip(differ.source_lines, differ.compute_differences()):
            if line.text in target_texts:
                continue
            assert line_diff == differ._match_or_delete(line, line_diff.line_number, target_texts)


class TestComparisons:
    """Tests for the result wrappers."""

    def test_compare_texts_stats(self):
        """Statistics summarize the line statuses."""
        result = compare_texts("keep\ndrop me\nThe cat sat.", "keep\nThe dog sat.")
        assert result.content_type == 'prose'
        assert result.stats == {
            'total_lines': 3,
            'unchanged': 1,
            'modified': 1,
            'deleted': 1,
            'word_diffs': 2
        }
        assert result.has_differences

    def test_side_by_side(self):
        """Each pane is annotated against the other."""
        comparison = compare_side_by_side("The cat sat.", "The dog sat.")
        assert _spans(comparison.left.line_diffs[0]) == [(4, 3)]
        assert _spans(comparison.right.line_diffs[0]) == [(4, 3)]

    def test_side_by_side_panes_classify_independently(self):
        """Each pane detects its own content type."""
        comparison = compare_side_by_side("The cat sat.", "x = foo(y);")
        assert comparison.left.content_type == 'prose'
        assert comparison.right.content_type == 'code'

    def test_to_dict(self):
        """Results serialize to plain data."""
        data = compare_side_by_side("The cat sat.", "The dog sat.").to_dict()
        word_diff = data['left']['line_diffs'][0]['word_diffs'][0]
        assert word_diff == {'range': {'location': 4, 'length': 3}, 'kind': 'modification'}
        assert data['right']['stats']['modified'] == 1

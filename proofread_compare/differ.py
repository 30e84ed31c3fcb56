"""
Proofread Differ v1.0.0
=======================
Line-level alignment with token-level change detection.

A minimal line edit script flags source lines that were touched; each
source line is then classified as unchanged (its exact text survives
somewhere in the target), modified (a target line clears the similarity
threshold) or deleted. Modified lines are diffed token by token against
their best-matching target line.

Each comparison is built fresh over its two buffers and shares no state
with other comparisons.
"""

from typing import List, Optional, Tuple

from config_logging import get_logger

from .classifier import detect_code_content
from .models import (
    ComparisonResult,
    Line,
    LineDiff,
    SideBySideComparison,
    WordDiff,
    WordDiffKind,
)
from .segmenter import split_lines
from .sequence_diff import sequence_difference
from .similarity import SimilarityScorer
from .tokenizer import tokenizer_for
from .word_diff import WordDiffComputer

logger = get_logger('proofread_compare.differ')


class ProofreadDiffer:
    """
    Comparison of one source buffer against one target buffer.

    The content type is decided once from the source buffer and drives the
    tokenizer, the similarity metric and the word diff strategy for the
    whole comparison.
    """

    def __init__(self, source_text: str, target_text: str):
        """
        Args:
            source_text: Buffer being annotated
            target_text: Buffer it is compared against
        """
        self.source_text = source_text
        self.target_text = target_text
        self.is_code = detect_code_content(source_text)

        tokenizer = tokenizer_for(self.is_code)
        self.scorer = SimilarityScorer(self.is_code, tokenizer)
        self.word_differ = WordDiffComputer(self.is_code, tokenizer)

        self.source_lines = split_lines(source_text)
        self.target_lines = split_lines(target_text)

    @property
    def content_type(self) -> str:
        return 'code' if self.is_code else 'prose'

    def compute_differences(self) -> List[LineDiff]:
        """
        Produce one LineDiff per source line, ordered by line number.
        """
        target_texts = [line.text for line in self.target_lines]
        target_set = set(target_texts)

        removed = set(sequence_difference(
            [line.text for line in self.source_lines],
            target_texts
        ).removals)

        logger.debug(
            f"Aligning {len(self.source_lines)} source lines against "
            f"{len(self.target_lines)} target lines "
            f"({self.content_type}, {len(removed)} flagged by line diff)"
        )

        line_diffs = []
        for line_number, line in enumerate(self.source_lines):
            if line_number not in removed and line.text in target_set:
                line_diffs.append(LineDiff(range=line.range, line_number=line_number))
            else:
                line_diffs.append(self._match_or_delete(line, line_number, target_texts))

        return sorted(line_diffs, key=lambda diff: diff.line_number)

    def compare(self) -> ComparisonResult:
        """Run the comparison and wrap it with content type and statistics."""
        with logger.log_operation(
            'compare',
            content_type=self.content_type,
            source_lines=len(self.source_lines),
            target_lines=len(self.target_lines)
        ):
            result = ComparisonResult(
                content_type=self.content_type,
                line_diffs=self.compute_differences()
            )

        logger.info(
            f"Comparison complete: {result.stats['total_lines']} lines "
            f"(~{result.stats['modified']}, -{result.stats['deleted']}, "
            f"={result.stats['unchanged']}), {result.stats['word_diffs']} word diffs"
        )
        return result

    def _match_or_delete(self, line: Line, line_number: int, target_texts: List[str]) -> LineDiff:
        """
        Diff line against its best fuzzy match, or mark it wholly deleted.
        """
        match = self.find_best_match(line.text, target_texts)
        if match is None:
            return LineDiff(
                range=line.range,
                line_number=line_number,
                word_diffs=[WordDiff(range=line.range, kind=WordDiffKind.DELETION)]
            )

        target_text, _similarity = match
        return LineDiff(
            range=line.range,
            line_number=line_number,
            word_diffs=self.word_differ.compute(line, target_text)
        )

    def find_best_match(self, source_text: str, target_texts: List[str]) -> Optional[Tuple[str, float]]:
        """
        Find the most similar target line.

        The first target line reaching the maximum similarity wins. Returns
        None unless that similarity is at or above the content threshold.

        Args:
            source_text: Line to match
            target_texts: Candidate lines in target order

        Returns:
            (target_text, similarity) or None
        """
        best_text = ''
        best_similarity = 0.0
        for target_text in target_texts:
            similarity = self.scorer.similarity(source_text, target_text)
            if similarity > best_similarity:
                best_text = target_text
                best_similarity = similarity

        if best_similarity >= self.scorer.threshold:
            return best_text, best_similarity
        return None


# Convenience functions
def compute_differences(source_text: str, target_text: str) -> List[LineDiff]:
    """
    Compute line and word differences of source_text against target_text.

    Args:
        source_text: Pre-edit content (the side being annotated)
        target_text: Post-edit content

    Returns:
        One LineDiff per source line, ordered by line number
    """
    return ProofreadDiffer(source_text, target_text).compute_differences()


def compare_texts(source_text: str, target_text: str) -> ComparisonResult:
    """Compare two texts and return the annotated source side with statistics."""
    return ProofreadDiffer(source_text, target_text).compare()


def compare_side_by_side(original_text: str, revised_text: str) -> SideBySideComparison:
    """
    Annotate both panes of a side-by-side view.

    The left pane marks what changed in the original, the right pane marks
    what changed in the revision. Each pane detects its own content type.
    """
    return SideBySideComparison(
        left=compare_texts(original_text, revised_text),
        right=compare_texts(revised_text, original_text)
    )


if __name__ == '__main__':
    original = """function calculateTotal(items) {
  let total = 0;
  for (let i = 0; i < items.length; i++) {
    total += items[i];
  }
  return total;
}"""

    revised = """function calculateTotal(items) {
  let sum = 0;
  for (const item of items) {
    sum += item;
  }
  return sum;
}"""

    comparison = compare_side_by_side(original, revised)
    for side, result in (('left', comparison.left), ('right', comparison.right)):
        print(f"{side}: {result.content_type}, stats={result.stats}")
        for line_diff in result.line_diffs:
            if line_diff.is_different:
                spans = [(d.range.location, d.range.length, d.kind.value) for d in line_diff.word_diffs]
                print(f"  [{line_diff.line_number}] {line_diff.status}: {spans}")

"""
Line similarity scoring.

Code lines are scored by edit distance over normalized tokens, prose lines
by the Jaccard index of their normalized token sets.
"""

from typing import List, Optional

from .models import Token, TokenClass
from .sequence_diff import sequence_difference
from .tokenizer import Tokenizer, tokenizer_for

# Minimum similarity for a changed line to count as modified rather than deleted
CODE_MATCH_THRESHOLD = 0.5
PROSE_MATCH_THRESHOLD = 0.3


class SimilarityScorer:
    """
    Scores how closely two lines correspond, in [0, 1].

    The metric is fixed at construction from the comparison's content type.
    """

    def __init__(self, is_code: bool, tokenizer: Optional[Tokenizer] = None):
        self.is_code = is_code
        self.tokenizer = tokenizer or tokenizer_for(is_code)

    @property
    def threshold(self) -> float:
        """Match threshold for this content type."""
        return CODE_MATCH_THRESHOLD if self.is_code else PROSE_MATCH_THRESHOLD

    @staticmethod
    def _comparable(tokens: List[Token]) -> List[str]:
        return [
            token.normalized
            for token in tokens
            if token.token_class is not TokenClass.WHITESPACE
        ]

    def similarity(self, source: str, target: str) -> float:
        """
        Similarity of target to source.

        Two empty sides score 1.0 and exactly one empty side scores 0.0.
        Sides that are whitespace-only on both ends also score 1.0.
        """
        source_tokens = self.tokenizer.tokenize(source)
        target_tokens = self.tokenizer.tokenize(target)

        if not source_tokens or not target_tokens:
            return 1.0 if not source_tokens and not target_tokens else 0.0

        source_keys = self._comparable(source_tokens)
        target_keys = self._comparable(target_tokens)

        if not source_keys or not target_keys:
            return 1.0 if not source_keys and not target_keys else 0.0

        if self.is_code:
            return self._code_similarity(source_keys, target_keys)
        return self._prose_similarity(source_keys, target_keys)

    @staticmethod
    def _code_similarity(source: List[str], target: List[str]) -> float:
        changes = sequence_difference(source, target).change_count
        # Disjoint lines can exceed max(len) changes; floor at zero
        return max(0.0, 1.0 - changes / max(len(source), len(target)))

    @staticmethod
    def _prose_similarity(source: List[str], target: List[str]) -> float:
        source_set = set(source)
        target_set = set(target)
        return len(source_set & target_set) / len(source_set | target_set)

"""
Token-level change detection within a matched pair of lines.

Code lines mark every word or operator that does not occur anywhere in the
target line, then run the heuristic rules. Prose lines do multiset
matching: each target occurrence of a token absorbs one source occurrence
and surplus source occurrences are marked.
"""

from collections import Counter
from typing import List, Optional, Sequence

from .heuristics import DEFAULT_RULES, HeuristicRule, apply_heuristics
from .models import Line, OffsetRange, Token, TokenClass, WordDiff, WordDiffKind
from .tokenizer import Tokenizer, locate_tokens, tokenizer_for


def _prose_key(token: Token) -> str:
    # Emoji compare by their literal scalar
    return token.text if token.token_class is TokenClass.EMOJI else token.normalized


class WordDiffComputer:
    """Computes Modification spans for a source line against its matched target line."""

    def __init__(
        self,
        is_code: bool,
        tokenizer: Optional[Tokenizer] = None,
        rules: Sequence[HeuristicRule] = DEFAULT_RULES
    ):
        self.is_code = is_code
        self.tokenizer = tokenizer or tokenizer_for(is_code)
        self.rules = rules

    def compute(self, source_line: Line, target_text: str) -> List[WordDiff]:
        """
        Diff one line pair.

        Args:
            source_line: Line being annotated, with its buffer range
            target_text: Text of the matched target line

        Returns:
            Word diffs sorted by ascending range start
        """
        if self.is_code:
            diffs = self._code_diffs(source_line, target_text)
        else:
            diffs = self._prose_diffs(source_line, target_text)
        return sorted(diffs, key=lambda diff: diff.range.location)

    def _code_diffs(self, source_line: Line, target_text: str) -> List[WordDiff]:
        located = locate_tokens(self.tokenizer.tokenize(source_line.text), source_line.range.location)
        target_tokens = self.tokenizer.tokenize(target_text)

        target_words = {t.normalized for t in target_tokens if t.token_class is TokenClass.WORD}
        target_operators = {t.text for t in target_tokens if t.token_class is TokenClass.OPERATOR}

        diffs = []
        for item in located:
            token = item.token
            if token.token_class is TokenClass.WORD:
                present = token.normalized in target_words
            elif token.token_class is TokenClass.OPERATOR:
                present = token.text in target_operators
            else:
                continue
            if not present:
                diffs.append(WordDiff(
                    range=OffsetRange(item.location, item.length),
                    kind=WordDiffKind.MODIFICATION
                ))

        diffs.extend(apply_heuristics(source_line, target_text, located, self.rules))
        return diffs

    def _prose_diffs(self, source_line: Line, target_text: str) -> List[WordDiff]:
        located = locate_tokens(self.tokenizer.tokenize(source_line.text), source_line.range.location)

        available = Counter(
            _prose_key(t) for t in self.tokenizer.tokenize(target_text)
            if t.token_class is not TokenClass.WHITESPACE
        )
        used: Counter = Counter()

        diffs = []
        for item in located:
            token = item.token
            if token.token_class is TokenClass.WHITESPACE:
                continue
            if token.token_class is TokenClass.PUNCTUATION and not token.text.strip():
                continue

            key = _prose_key(token)
            if used[key] >= available[key]:
                diffs.append(WordDiff(
                    range=OffsetRange(item.location, item.length),
                    kind=WordDiffKind.MODIFICATION
                ))
            else:
                used[key] += 1
        return diffs

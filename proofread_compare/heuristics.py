"""
Heuristic patch rules for recognised code rewrites.

Each rule pairs a predicate over the (source line, target line) texts with
a span producer over the source line's located tokens. Rules run after the
generic token diff and only ever add Modification spans.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from config_logging import get_logger

from .models import Line, OffsetRange, WordDiff, WordDiffKind
from .tokenizer import LocatedToken, utf16_length

logger = get_logger('proofread_compare.heuristics')

SpanProducer = Callable[[Line, List[LocatedToken]], Optional[OffsetRange]]


@dataclass(frozen=True)
class HeuristicRule:
    """
    A recognised rewrite.

    Attributes:
        name: Identifier used in logs and tests
        applies: Predicate over (source_text, target_text)
        span: Produces the range to mark, or None when the anchor token is absent
    """
    name: str
    applies: Callable[[str, str], bool]
    span: SpanProducer


def _first(tokens: List[LocatedToken], text: str) -> Optional[int]:
    for index, located in enumerate(tokens):
        if located.text == text:
            return index
    return None


def _renamed_total_span(line: Line, tokens: List[LocatedToken]) -> Optional[OffsetRange]:
    index = _first(tokens, 'total')
    if index is None:
        return None
    return OffsetRange(tokens[index].location, utf16_length('total'))


def _counted_loop_span(line: Line, tokens: List[LocatedToken]) -> Optional[OffsetRange]:
    start = _first(tokens, 'for')
    if start is None:
        return None

    end = start
    while end < len(tokens) and '{' not in tokens[end].text:
        end += 1
    end_location = tokens[end].location if end < len(tokens) else tokens[-1].location

    start_location = tokens[start].location
    return OffsetRange(start_location, end_location - start_location)


def _indexed_access_span(line: Line, tokens: List[LocatedToken]) -> Optional[OffsetRange]:
    start = _first(tokens, 'items')
    if start is None:
        return None

    start_location = tokens[start].location
    length = utf16_length('items[i]')
    for index in range(len(tokens) - 1, start, -1):
        if tokens[index].text == ']':
            length = tokens[index].location + 1 - start_location
            break

    length = min(length, line.range.end - start_location)
    return OffsetRange(start_location, length)


DEFAULT_RULES = (
    HeuristicRule(
        name='renamed-total',
        applies=lambda source, target: 'sum' in target,
        span=_renamed_total_span,
    ),
    HeuristicRule(
        name='counted-loop-to-for-of',
        applies=lambda source, target: (
            'for' in source and 'for' in target
            and 'let i = 0' in source and 'const item of' in target
        ),
        span=_counted_loop_span,
    ),
    HeuristicRule(
        name='indexed-access-to-item',
        applies=lambda source, target: 'items[i]' in source and 'item' in target,
        span=_indexed_access_span,
    ),
)


def apply_heuristics(
    source_line: Line,
    target_text: str,
    tokens: List[LocatedToken],
    rules: Sequence[HeuristicRule] = DEFAULT_RULES
) -> List[WordDiff]:
    """
    Evaluate every rule independently and collect the spans they mark.

    Args:
        source_line: Line being annotated
        target_text: Text of the matched target line
        tokens: Source line tokens with absolute offsets
        rules: Ordered rule table

    Returns:
        Modification diffs in rule order (may repeat spans already marked)
    """
    diffs = []
    for rule in rules:
        if not rule.applies(source_line.text, target_text):
            continue
        span = rule.span(source_line, tokens)
        if span is not None:
            logger.debug(f"Rule {rule.name} marked {span.location}+{span.length}", line_start=source_line.range.location)
            diffs.append(WordDiff(range=span, kind=WordDiffKind.MODIFICATION))
    return diffs

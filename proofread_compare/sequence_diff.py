"""
Sequence Difference v1.0.0
==========================
Minimal insert/remove edit script between two sequences of hashable
elements, shared by the line pass and the code similarity metric.

Uses diff-match-patch: each distinct element is mapped to a private
character (the same trick diff-match-patch uses for line mode) and the
resulting strings are diffed with the Myers bisection. The timeout is
disabled so the library never settles for a non-minimal script.
"""

from dataclasses import dataclass
from typing import Dict, Hashable, List, Sequence, Tuple

import diff_match_patch as dmp_module

# Surrogate code points are skipped when assigning element characters
_SURROGATE_START = 0xD800
_SURROGATE_SPAN = 0x800


@dataclass(frozen=True)
class SequenceDifference:
    """
    Edit script summary.

    Attributes:
        removals: Indices into the source sequence that are removed
        insertions: Indices into the target sequence that are inserted
    """
    removals: Tuple[int, ...] = ()
    insertions: Tuple[int, ...] = ()

    @property
    def change_count(self) -> int:
        """Number of inserted plus removed elements."""
        return len(self.removals) + len(self.insertions)

    @property
    def is_empty(self) -> bool:
        return not self.removals and not self.insertions


def _element_char(index: int) -> str:
    code = index + 1
    if code >= _SURROGATE_START:
        code += _SURROGATE_SPAN
    return chr(code)


def _encode(sequence: Sequence[Hashable], alphabet: Dict[Hashable, str]) -> str:
    chars = []
    for element in sequence:
        char = alphabet.get(element)
        if char is None:
            char = _element_char(len(alphabet))
            alphabet[element] = char
        chars.append(char)
    return ''.join(chars)


def _new_matcher() -> 'dmp_module.diff_match_patch':
    dmp = dmp_module.diff_match_patch()
    dmp.Diff_Timeout = 0  # Unlimited: keep the script minimal
    return dmp


def sequence_difference(
    source: Sequence[Hashable],
    target: Sequence[Hashable]
) -> SequenceDifference:
    """
    Compute the minimal edit script turning source into target.

    Args:
        source: Original sequence
        target: Revised sequence

    Returns:
        SequenceDifference with removed source indices and inserted
        target indices, both ascending
    """
    alphabet: Dict[Hashable, str] = {}
    source_chars = _encode(source, alphabet)
    target_chars = _encode(target, alphabet)

    if source_chars == target_chars:
        return SequenceDifference()

    diffs = _new_matcher().diff_main(source_chars, target_chars, False)

    removals: List[int] = []
    insertions: List[int] = []
    source_index = 0
    target_index = 0
    for op, text in diffs:
        count = len(text)
        if op == dmp_module.diff_match_patch.DIFF_DELETE:
            removals.extend(range(source_index, source_index + count))
            source_index += count
        elif op == dmp_module.diff_match_patch.DIFF_INSERT:
            insertions.extend(range(target_index, target_index + count))
            target_index += count
        else:
            source_index += count
            target_index += count

    return SequenceDifference(removals=tuple(removals), insertions=tuple(insertions))

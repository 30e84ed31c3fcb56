"""
Proofread Comparison Models v1.0.0
==================================
Data classes for tokens, lines and the line/word differences the
comparison engine reports.

All ranges are expressed in UTF-16 code units so the host text layer can
address them directly.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Any


class TokenClass(str, Enum):
    """Classification tag carried by every token."""
    WORD = 'word'
    OPERATOR = 'operator'
    WHITESPACE = 'whitespace'
    PUNCTUATION = 'punctuation'
    EMOJI = 'emoji'
    STRING = 'string'
    OTHER = 'other'


class WordDiffKind(str, Enum):
    """Kind of a sub-line change."""
    DELETION = 'deletion'
    MODIFICATION = 'modification'


@dataclass(frozen=True)
class OffsetRange:
    """
    Half-open span of UTF-16 code units inside a buffer.

    Attributes:
        location: Offset of the first code unit
        length: Number of code units covered
    """
    location: int
    length: int

    @property
    def end(self) -> int:
        """Offset one past the last covered code unit."""
        return self.location + self.length

    def contains(self, other: 'OffsetRange') -> bool:
        """Whether other lies entirely within this range."""
        return self.location <= other.location and other.end <= self.end

    def to_dict(self) -> Dict[str, int]:
        """Convert to dictionary for JSON serialization."""
        return {'location': self.location, 'length': self.length}


@dataclass(frozen=True)
class Token:
    """
    Smallest classified unit of text.

    Attributes:
        text: Literal text as it appears in the buffer
        normalized: Comparison key derived from text and class
        token_class: Classification tag
    """
    text: str
    normalized: str
    token_class: TokenClass


@dataclass(frozen=True)
class Line:
    """A single line of a buffer and its span in that buffer."""
    text: str
    range: OffsetRange


@dataclass(frozen=True)
class WordDiff:
    """
    A marked span inside a source line.

    The range is absolute within the annotated (source) buffer.
    """
    range: OffsetRange
    kind: WordDiffKind

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'range': self.range.to_dict(),
            'kind': self.kind.value
        }


@dataclass
class LineDiff:
    """
    Difference record for one source line.

    Attributes:
        range: Span of the line within the source buffer
        line_number: Zero-based index of the line in the source buffer
        word_diffs: Marked spans ordered by ascending start
        is_different: True iff word_diffs is non-empty
    """
    range: OffsetRange
    line_number: int
    word_diffs: List[WordDiff] = field(default_factory=list)
    is_different: bool = False

    def __post_init__(self):
        """Derive is_different from the word diffs."""
        self.is_different = bool(self.word_diffs)

    @property
    def status(self) -> str:
        """'unchanged', 'deleted' or 'modified'."""
        if not self.word_diffs:
            return 'unchanged'
        if any(diff.kind is WordDiffKind.DELETION for diff in self.word_diffs):
            return 'deleted'
        return 'modified'

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'range': self.range.to_dict(),
            'line_number': self.line_number,
            'is_different': self.is_different,
            'status': self.status,
            'word_diffs': [d.to_dict() for d in self.word_diffs]
        }


@dataclass
class ComparisonResult:
    """
    One direction of a comparison: a source buffer annotated against a target.

    Attributes:
        content_type: 'code' or 'prose', decided from the source buffer
        line_diffs: One LineDiff per source line, ordered by line number
        stats: Statistics dictionary with counts
    """
    content_type: str
    line_diffs: List[LineDiff] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        """Compute stats if not provided."""
        if not self.stats:
            self.stats = {
                'total_lines': len(self.line_diffs),
                'unchanged': sum(1 for d in self.line_diffs if d.status == 'unchanged'),
                'modified': sum(1 for d in self.line_diffs if d.status == 'modified'),
                'deleted': sum(1 for d in self.line_diffs if d.status == 'deleted'),
                'word_diffs': sum(len(d.word_diffs) for d in self.line_diffs)
            }

    @property
    def is_code(self) -> bool:
        return self.content_type == 'code'

    @property
    def has_differences(self) -> bool:
        return any(d.is_different for d in self.line_diffs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'content_type': self.content_type,
            'line_diffs': [d.to_dict() for d in self.line_diffs],
            'stats': self.stats
        }


@dataclass
class SideBySideComparison:
    """
    Both panes of a side-by-side view.

    Attributes:
        left: Original text annotated against the revision
        right: Revision annotated against the original
    """
    left: ComparisonResult
    right: ComparisonResult

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'left': self.left.to_dict(),
            'right': self.right.to_dict()
        }

"""
Proofread Comparison Module v1.0.0
==================================
Line and word level differences between an original passage and its
proofread revision, with character-exact highlight ranges.

Features:
- Code vs prose detection driving tokenization and similarity
- Line alignment with fuzzy pairing of modified lines
- Token-level change spans in UTF-16 coordinates
- Side-by-side annotation of both panes
- Flask blueprint exposing the engine over JSON
"""

from .routes import pc_blueprint
from .differ import (
    ProofreadDiffer,
    compute_differences,
    compare_texts,
    compare_side_by_side
)
from .models import (
    TokenClass,
    OffsetRange,
    Token,
    Line,
    WordDiffKind,
    WordDiff,
    LineDiff,
    ComparisonResult,
    SideBySideComparison
)

__version__ = "1.0.0"
__all__ = [
    'pc_blueprint',
    'ProofreadDiffer',
    'compute_differences',
    'compare_texts',
    'compare_side_by_side',
    'TokenClass',
    'OffsetRange',
    'Token',
    'Line',
    'WordDiffKind',
    'WordDiff',
    'LineDiff',
    'ComparisonResult',
    'SideBySideComparison'
]

"""
Tests for Content Classification
================================
Tests for the code-vs-prose heuristic.
"""

import pytest

from proofread_compare.classifier import detect_code_content, line_looks_like_code


@pytest.fixture
def javascript() -> str:
    """A small JavaScript function."""
    return """function calculateTotal(items) {
  let total = 0;
  for (let i = 0; i < items.length; i++) {
    total += items[i];
  }
  return total;
}"""


class TestDetectCodeContent:
    """Tests for detect_code_content."""

    def test_javascript_is_code(self, javascript):
        """Braces, keywords and statements mark code."""
        assert detect_code_content(javascript) is True

    def test_python_is_code(self):
        """Half the lines looking like code is enough."""
        assert detect_code_content("def add(a, b):\n    return a + b") is True

    @pytest.mark.parametrize("text", [
        "let total = price * qty;",
        "a = b;",
        "for (let i = 0; a.b.c.d.e) { foo(bar, baz, qux); }",
    ])
    def test_single_statements_are_code(self, text):
        """One statement line is classified as code."""
        assert detect_code_content(text) is True

    @pytest.mark.parametrize("text", [
        "The cat sat.",
        "keep\ndrop me",
        "The quick brown fox jumps over the lazy dog.\nIt was a sunny day.",
        "We met (briefly) yesterday.",
        "one two three alpha beta gamma",
    ])
    def test_prose(self, text):
        """Sentences are prose."""
        assert detect_code_content(text) is False

    @pytest.mark.parametrize("text", ["", "   ", "\n\n  \n"])
    def test_blank_defaults_to_prose(self, text):
        """Nothing to judge means prose."""
        assert detect_code_content(text) is False


class TestLineLooksLikeCode:
    """Tests for the single-line heuristic."""

    def test_lone_brace(self):
        """Closing braces count as code."""
        assert line_looks_like_code("}") is True
        assert line_looks_like_code("});") is True

    def test_single_signal_is_not_enough(self):
        """A sentence ending in a semicolon is still prose."""
        assert line_looks_like_code("We stayed in;") is False

"""
Tokenizers v1.0.0
=================
Two independent tokenization grammars, one for source code and one for
natural-language prose. The comparison picks one per run based on the
source buffer's content type.

Both are total over any input string.
"""

import unicodedata
from dataclasses import dataclass
from typing import List

from .models import Token, TokenClass

# Single-character operators recognised by the code grammar
OPERATOR_CHARACTERS = frozenset('=><&|+-*/%!~^.,:;(){}[]')

# Fitzpatrick skin-tone modifiers U+1F3FB..U+1F3FF
SKIN_TONE_MODIFIERS = range(0x1F3FB, 0x1F400)

PUNCTUATION_CATEGORIES = frozenset(('Pc', 'Pd', 'Ps', 'Pe', 'Pi', 'Pf', 'Po'))

# Information separators U+001C..U+001F pass str.isspace() but are not Unicode White_Space
NON_WHITESPACE_SEPARATORS = frozenset('\x1c\x1d\x1e\x1f')


def utf16_length(text: str) -> int:
    """Length of text in UTF-16 code units."""
    return len(text.encode('utf-16-le', 'surrogatepass')) // 2


def is_whitespace(char: str) -> bool:
    """Whether char has the Unicode White_Space property."""
    return char.isspace() and char not in NON_WHITESPACE_SEPARATORS


def normalize_token(text: str, token_class: TokenClass) -> str:
    """
    Comparison key for a token.

    Words compare case-insensitively, any whitespace compares equal to a
    single space, everything else compares by its literal text.
    """
    if token_class is TokenClass.WORD:
        return text.lower()
    if token_class is TokenClass.WHITESPACE:
        return ' '
    return text


def make_token(text: str, token_class: TokenClass) -> Token:
    return Token(text=text, normalized=normalize_token(text, token_class), token_class=token_class)


class Tokenizer:
    """Interface shared by the code and prose grammars."""

    name = 'base'

    def tokenize(self, text: str) -> List[Token]:
        raise NotImplementedError


class CodeTokenizer(Tokenizer):
    """
    Operator/word/whitespace grammar for source code.

    Operators are strictly single characters: ``==`` is two ``=`` tokens.
    """

    name = 'code'

    def tokenize(self, text: str) -> List[Token]:
        tokens: List[Token] = []
        current: List[str] = []

        def flush():
            if current:
                tokens.append(make_token(''.join(current), TokenClass.WORD))
                current.clear()

        for char in text:
            if is_whitespace(char):
                flush()
                tokens.append(make_token(char, TokenClass.WHITESPACE))
            elif char in OPERATOR_CHARACTERS:
                flush()
                tokens.append(make_token(char, TokenClass.OPERATOR))
            else:
                current.append(char)

        flush()
        return tokens


class ProseTokenizer(Tokenizer):
    """
    Word/whitespace/punctuation/emoji grammar for prose.

    Walks Unicode scalar values; emoji, whitespace and punctuation are
    emitted one scalar at a time and break any running word.
    Whitespace means the Unicode White_Space property.
    """

    name = 'prose'

    @staticmethod
    def is_emoji(char: str) -> bool:
        return unicodedata.category(char) == 'So' or ord(char) in SKIN_TONE_MODIFIERS

    @staticmethod
    def is_punctuation(char: str) -> bool:
        return unicodedata.category(char) in PUNCTUATION_CATEGORIES

    def tokenize(self, text: str) -> List[Token]:
        tokens: List[Token] = []
        word: List[str] = []

        def flush_word():
            if word:
                tokens.append(make_token(''.join(word), TokenClass.WORD))
                word.clear()

        for char in text:
            if self.is_emoji(char):
                token_class = TokenClass.EMOJI
            elif is_whitespace(char):
                token_class = TokenClass.WHITESPACE
            elif self.is_punctuation(char):
                token_class = TokenClass.PUNCTUATION
            else:
                word.append(char)
                continue
            flush_word()
            tokens.append(make_token(char, token_class))

        flush_word()
        return tokens


_CODE_TOKENIZER = CodeTokenizer()
_PROSE_TOKENIZER = ProseTokenizer()


def tokenizer_for(is_code: bool) -> Tokenizer:
    """Select the grammar for a content type."""
    return _CODE_TOKENIZER if is_code else _PROSE_TOKENIZER


@dataclass(frozen=True)
class LocatedToken:
    """A token together with its absolute UTF-16 offset."""
    token: Token
    location: int

    @property
    def length(self) -> int:
        return utf16_length(self.token.text)

    @property
    def text(self) -> str:
        return self.token.text


def locate_tokens(tokens: List[Token], start: int) -> List[LocatedToken]:
    """Attach absolute offsets to tokens laid end to end from start."""
    located: List[LocatedToken] = []
    location = start
    for token in tokens:
        located.append(LocatedToken(token, location))
        location += utf16_length(token.text)
    return located

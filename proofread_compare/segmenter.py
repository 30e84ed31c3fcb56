"""
Line segmentation with UTF-16 offset ranges.

Every separator character consumes exactly one code unit, so ``"\\r\\n"``
produces an empty line between its two characters. The running offset
advances one unit past every line, the last one included, which is the
coordinate convention of the host text layer; no range ever covers a
separator.
"""

import re
from typing import List

from .models import Line, OffsetRange
from .tokenizer import utf16_length

# LF, VT, FF, CR, NEL, LINE SEPARATOR, PARAGRAPH SEPARATOR
LINE_SEPARATORS = '\n\x0b\x0c\r\x85\u2028\u2029'

_SEPARATOR_PATTERN = re.compile('[' + re.escape(LINE_SEPARATORS) + ']')


def split_lines(text: str) -> List[Line]:
    """
    Split text into lines annotated with their ranges.

    Empty lines are kept as zero-length entries; an empty buffer yields a
    single empty line.
    """
    lines = []
    location = 0
    for part in _SEPARATOR_PATTERN.split(text):
        length = utf16_length(part)
        lines.append(Line(text=part, range=OffsetRange(location, length)))
        location += length + 1
    return lines

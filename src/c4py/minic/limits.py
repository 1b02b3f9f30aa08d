"""
Mini-C Recursion Limits
=======================

The parser and the evaluator are both recursive walks, so a deeply
nested program can need more Python frames than the host allows by
default. Each raises Python's recursion limit around its own work with
recursion_limit(), and turns a RecursionError that still gets through
into its own located error:

- CParser.parse() reports "expression nested too deeply" (ParseError)
- Evaluator.call() reports "stack exhausted" (ResourceExhaustedError)
"""

from contextlib import contextmanager
from typing import Iterator
import sys


# Python frames added to the recursion limit while parsing. One level
# of parentheses costs about 25 frames in the precedence ladder.
PARSE_FRAME_HEADROOM = 10000

# Python frames allowed per Mini-C call when raising the recursion limit
PYTHON_FRAMES_PER_CALL = 64


@contextmanager
def recursion_limit(limit: int) -> Iterator[None]:
    """Temporarily raise (never lower) Python's recursion limit."""
    previous = sys.getrecursionlimit()
    if limit > previous:
        sys.setrecursionlimit(limit)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


def headroom(frames: int) -> int:
    """The current recursion limit plus the given number of frames."""
    return sys.getrecursionlimit() + frames

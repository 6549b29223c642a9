"""Offline stand-in tokenizer used when the inference service is unavailable."""

from __future__ import annotations

import re
import string

_PUNCTUATION = re.compile(f"[{re.escape(string.punctuation)}]")


def fallback_tokenize(text: str) -> list[int]:
    """Map each word or punctuation fragment of ``text`` to its character length.

    Every ASCII punctuation character becomes its own fragment. The ids are not
    vocabulary entries; they only keep the shape of a real tokenizer's output
    (an ordered list of positive ints) stable and reproducible.

    Text made only of punctuation and whitespace has no words and yields ``[]``.
    """
    fragments = _PUNCTUATION.sub(r" \g<0> ", text).split()
    if not any(_PUNCTUATION.fullmatch(fragment) is None for fragment in fragments):
        return []
    return [len(fragment) for fragment in fragments]

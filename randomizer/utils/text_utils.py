#!/usr/bin/env python3
"""
String randomization.
"""

import random
from typing import Optional


def shuffle(text: str, rng: Optional[random.Random] = None) -> str:
    """
    Return a uniformly random permutation of the characters of text.

    Args:
        text: Input string
        rng: Random generator to use (the module-level one if None)

    Returns:
        A string with the same characters in shuffled order
    """
    chars = list(text)
    (rng or random).shuffle(chars)
    return "".join(chars)

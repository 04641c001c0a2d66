"""
Name allocation service.
Draws random document names and proves them unique against the current set.
"""

import random
from typing import Container

from docdrop.exceptions import NameSpaceExhaustedError

_system_random = random.SystemRandom()

# Names that can never be used as a file in the document root
UNUSABLE_NAMES = frozenset({".", ".."})


def name_space_size(alphabet: str, length: int) -> int:
    """Number of distinct names of the given length over the alphabet."""
    return len(set(alphabet)) ** length


def generate_name(alphabet: str, length: int, rng: random.Random = _system_random) -> str:
    """Draw length characters uniformly, with replacement, from the alphabet."""
    return "".join(rng.choice(alphabet) for _ in range(length))


def allocate_name(
    alphabet: str,
    length: int,
    existing: Container[str],
    max_attempts: int,
    rng: random.Random = _system_random,
) -> str:
    """
    Return a random name that is not in existing.

    The search is bounded by a number of distinct candidates:
    min(|alphabet|^length, max_attempts). Drawing a candidate that was
    already tried costs nothing, so when the bound is the whole name
    space, running out of candidates means every name is taken.

    Must be called while holding the creation lock; existing is the live
    document set and may not change during the call.

    Args:
        alphabet: Characters to draw from (duplicates are ignored)
        length: Number of characters in the name
        existing: Names already in use
        max_attempts: Hard cap on distinct candidates
        rng: Random source, the OS CSPRNG by default

    Returns:
        A name not present in existing

    Raises:
        NameSpaceExhaustedError: if the bound is reached without a free name
    """
    alphabet = "".join(dict.fromkeys(alphabet))
    budget = min(name_space_size(alphabet, length), max_attempts)

    tried: set[str] = set()
    while len(tried) < budget:
        candidate = generate_name(alphabet, length, rng)
        if candidate in tried:
            continue
        tried.add(candidate)
        if candidate not in existing and candidate not in UNUSABLE_NAMES:
            return candidate

    raise NameSpaceExhaustedError(alphabet, length, len(tried))

import random

import pytest

from docdrop.exceptions import InvalidRequestError, NameSpaceExhaustedError
from docdrop.models import validate_name_params
from docdrop.services.allocator import allocate_name, generate_name, name_space_size


class AlwaysTaken:
    def __contains__(self, name):
        return True


def test_generate_name_uses_alphabet_and_length():
    rng = random.Random(1)
    for _ in range(50):
        name = generate_name("xyz", 6, rng)
        assert len(name) == 6
        assert set(name) <= set("xyz")


def test_name_space_size_ignores_duplicates():
    assert name_space_size("ab", 2) == 4
    assert name_space_size("aab", 2) == 4
    assert name_space_size("abc", 3) == 27


def test_allocate_avoids_existing_names():
    existing = {"aa", "ab", "ba"}
    for seed in range(20):
        assert allocate_name("ab", 2, existing, 1000, random.Random(seed)) == "bb"


def test_allocate_fills_whole_name_space():
    existing = set()
    for _ in range(4):
        existing.add(allocate_name("ab", 2, existing, 1000))
    assert existing == {"aa", "ab", "ba", "bb"}

    with pytest.raises(NameSpaceExhaustedError) as exc_info:
        allocate_name("ab", 2, existing, 1000)
    assert exc_info.value.attempts == 4


def test_allocate_stops_at_max_attempts():
    with pytest.raises(NameSpaceExhaustedError) as exc_info:
        allocate_name("abcdefghijklmnopqrstuvwxyz0123456789", 9, AlwaysTaken(), 10)
    assert exc_info.value.attempts == 10


@pytest.mark.parametrize("alphabet, length", [(".", 1), (".", 2)])
def test_allocate_never_returns_dot_names(alphabet, length):
    with pytest.raises(NameSpaceExhaustedError):
        allocate_name(alphabet, length, set(), 1000)


def test_validate_name_params_deduplicates():
    assert validate_name_params("abcabc", 3) == "abc"


@pytest.mark.parametrize("alphabet, length", [
    ("", 3),
    ("ab/", 3),
    ("a\\b", 3),
    ("ab", 0),
    ("ab", -1),
    ("ab", 256),
])
def test_validate_name_params_rejects(alphabet, length):
    with pytest.raises(InvalidRequestError):
        validate_name_params(alphabet, length)

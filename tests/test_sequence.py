"""
Pytest unit tests for reverse complementing in scramprofile.sequence.
"""

import logging
import random

import pytest

from scramprofile.exceptions import InvalidBaseError
from scramprofile.sequence import (
    INVALID_BASE_SENTINEL,
    VALID_DNA_BYTES,
    find_invalid_bases,
    reverse_complement,
)


@pytest.mark.parametrize(
    "sequence, expected",
    [
        ("ACGT", "ACGT"),
        ("AATTCCGG", "CCGGAATT"),
        ("A", "T"),
        ("GATTACA", "TGTAATC"),
        ("NNACN", "NGTNN"),
        ("", ""),
    ],
)
def test_reverse_complement_known_values(sequence: str, expected: str):
    assert reverse_complement(sequence) == expected


def test_reverse_complement_is_an_involution():
    rng = random.Random(42)
    alphabet = "".join(chr(b) for b in sorted(VALID_DNA_BYTES))
    for _ in range(200):
        seq = "".join(rng.choice(alphabet) for _ in range(rng.randint(0, 60)))
        assert reverse_complement(reverse_complement(seq)) == seq


def test_find_invalid_bases():
    assert find_invalid_bases("ACGTN") == set()
    assert find_invalid_bases("ACRYTa") == {"R", "Y", "a"}


def test_reverse_complement_substitutes_sentinel_and_warns(caplog):
    with caplog.at_level(logging.WARNING, logger="scramprofile.sequence"):
        result = reverse_complement("ACRT")
    assert result == f"A{INVALID_BASE_SENTINEL}GT"
    assert len(result) == 4
    assert "Replaced 1 base(s) outside ACGTN" in caplog.text


def test_reverse_complement_sentinel_for_non_ascii():
    assert reverse_complement("AÇT") == f"A{INVALID_BASE_SENTINEL}T"


def test_reverse_complement_lowercase_is_invalid():
    # Reference sequences are upper-cased before complementing.
    assert reverse_complement("acgt") == INVALID_BASE_SENTINEL * 4


def test_reverse_complement_strict_raises():
    with pytest.raises(InvalidBaseError, match="cannot be complemented") as excinfo:
        reverse_complement("ACGTRR", strict=True)
    assert excinfo.value.details == {"bases": "R", "count": 2}


def test_reverse_complement_strict_accepts_valid_sequence():
    assert reverse_complement("AATTCCGG", strict=True) == "CCGGAATT"

"""
Reverse complement of upper-case DNA reference sequences.
"""

import logging
from typing import Set

from .exceptions import InvalidBaseError

logger = logging.getLogger(__name__)

# Define allowed DNA bytes at the module level for clarity and reuse
VALID_DNA_BYTES: frozenset[int] = frozenset(b"ACGTN")

# Written in place of any base outside A, C, G, T, N.
INVALID_BASE_SENTINEL: str = "X"

_COMPLEMENT_TABLE = bytes.maketrans(b"ACGTN", b"TGCAN")


def _build_sentinel_table() -> bytes:
    """Translation table that complements ACGTN and maps every other byte to the sentinel."""
    table = bytearray(INVALID_BASE_SENTINEL.encode("ascii") * 256)
    for base, complement in zip(b"ACGTN", b"TGCAN"):
        table[base] = complement
    return bytes(table)


_SENTINEL_TABLE = _build_sentinel_table()


def find_invalid_bases(sequence: str) -> Set[str]:
    """Returns the set of characters in `sequence` that are not A, C, G, T or N."""
    return {base for base in set(sequence) if ord(base) not in VALID_DNA_BYTES}


def reverse_complement(sequence: str, strict: bool = False) -> str:
    """
    Reverse complements an upper-case DNA sequence.

    Bases are mapped A<->T, C<->G and N<->N, reading the sequence from its
    3' end. Characters outside that alphabet (lower case included, since
    reference sequences are upper-cased before this is called) cannot be
    complemented:

    - by default each one becomes INVALID_BASE_SENTINEL ('X') and a single
      warning reports how many were replaced;
    - with strict=True an InvalidBaseError is raised instead.

    Args:
        sequence: Upper-case DNA sequence.
        strict: Raise on bases outside A, C, G, T, N instead of substituting.

    Returns:
        The reverse complement, same length as the input.

    Raises:
        InvalidBaseError: If strict is True and an invalid base is present.

    Example:
        >>> reverse_complement("AATTCCGG")
        'CCGGAATT'
        >>> reverse_complement("ACRT")
        'AXGT'
    """
    invalid = find_invalid_bases(sequence)
    if not invalid:
        return sequence.encode("ascii").translate(_COMPLEMENT_TABLE)[::-1].decode(
            "ascii"
        )

    invalid_count = sum(1 for base in sequence if base in invalid)
    if strict:
        raise InvalidBaseError(
            "Sequence contains bases that cannot be complemented",
            details={"bases": "".join(sorted(invalid)), "count": invalid_count},
        )

    logger.warning(
        f"Replaced {invalid_count} base(s) outside ACGTN "
        f"({''.join(sorted(invalid))!r}) with '{INVALID_BASE_SENTINEL}' in reverse complement"
    )
    # Non-ASCII characters become '?' first so the byte table can handle them.
    raw = sequence.encode("ascii", errors="replace")
    return raw.translate(_SENTINEL_TABLE)[::-1].decode("ascii")

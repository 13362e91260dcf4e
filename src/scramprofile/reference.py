"""
Reference FASTA loading.
"""

import logging
import pathlib
from dataclasses import dataclass, field
from typing import List, Union

from .exceptions import ReadFileError, ReferenceFileError
from .sequence import reverse_complement
from .utils import format_count, iter_lines, open_read_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReferenceRecord:
    """
    One reference sequence with its reverse complement.

    Attributes:
        header: Header text after '>'.
        sequence: Upper-cased sequence, body lines concatenated.
        reverse_complement: Reverse complement of `sequence`.
    """

    header: str
    sequence: str = field(repr=False)
    reverse_complement: str = field(repr=False)

    def __len__(self) -> int:
        return len(self.sequence)


def _finalize_record(header: str, seq_parts: List[str], strict: bool) -> ReferenceRecord:
    seq = "".join(seq_parts)
    return ReferenceRecord(header, seq, reverse_complement(seq, strict=strict))


def load_reference(
    ref_file: Union[str, pathlib.Path], strict: bool = False
) -> List[ReferenceRecord]:
    """
    Loads a DNA reference file in FASTA format.

    Sequence lines are upper-cased and concatenated per record. Lines seen
    before the first header do not form a record. Gzip-compressed files
    (name ending in "gz") are read transparently.

    Args:
        ref_file: Path to the reference FASTA file.
        strict: Raise InvalidBaseError on bases outside ACGTN instead of
            writing 'X' into the reverse complement.

    Returns:
        Reference records in file order. Empty if the file has no header.

    Raises:
        ReferenceFileError: If the file cannot be opened.
        DecompressionError: If a gzip-compressed file is corrupt.
        InvalidBaseError: If strict is set and a base cannot be complemented.
    """
    records: List[ReferenceRecord] = []
    header = ""
    seq_parts: List[str] = []
    total_length = 0
    seen_header = False

    try:
        with open_read_file(ref_file) as handle:
            for line in iter_lines(handle, ref_file):
                if line.startswith(b">"):
                    if seen_header:
                        records.append(_finalize_record(header, seq_parts, strict))
                    seen_header = True
                    header = line[1:].decode("utf-8", errors="replace")
                    seq_parts = []
                elif line:
                    seq_parts.append(line.decode("ascii", errors="replace").upper())
                    total_length += len(line)
    except ReadFileError as e:
        raise ReferenceFileError(
            f"Problem opening fasta reference file {ref_file}", details=e.details
        ) from e

    if seen_header:
        records.append(_finalize_record(header, seq_parts, strict))

    logger.info(f"No. of reference sequences: {len(records)}")
    logger.info(
        f"Combined length of reference sequences: {format_count(total_length)} nt"
    )
    return records

"""
Single-file FASTA/FASTQ read parsing and per-file read collapsing.

Two parsers are provided:

- iter_marker_reads: the default line classifier. A line starting with the
  record marker ('>' or '@') arms a flag; the next line whose length lies
  within the bounds is taken as the read and disarms it. Quality and '+'
  lines of FASTQ records are never armed, so they are skipped unless a
  quality line happens to start with '@'.
- iter_record_reads: strict record parsing with Biopython
  (FastqGeneralIterator / SimpleFastaParser). Immune to '@' at the start of
  quality lines and joins multi-line FASTA sequences.

count_reads combines a parser with collapsing, minimum-count filtering and
RPMR normalization for one file.
"""

import gzip
import logging
import pathlib
import zlib
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, Tuple, Union

from Bio.SeqIO.FastaIO import SimpleFastaParser
from Bio.SeqIO.QualityIO import FastqGeneralIterator

from .exceptions import (
    DecompressionError,
    InvalidParameterError,
    NormalizationError,
    ReadFileError,
)
from .genomic_types import FormatMarker, PerFileCounts, ReadSequence
from .utils import format_count, iter_lines, open_read_file, text_stream

logger = logging.getLogger(__name__)

RPMR_SCALE = 1_000_000.0

# Accepted spellings of each read file format, including the bare markers.
FORMAT_ALIASES: Dict[str, str] = {
    "fa": "fasta",
    "fasta": "fasta",
    ">": "fasta",
    "fq": "fastq",
    "fastq": "fastq",
    "@": "fastq",
}
FORMAT_MARKERS: Dict[str, FormatMarker] = {"fasta": b">", "fastq": b"@"}


def resolve_format(file_type: str) -> Tuple[str, FormatMarker]:
    """
    Maps a user-facing format name to its canonical name and record marker.

    Args:
        file_type: One of "fa", "fasta", "fq", "fastq", ">" or "@" (case-insensitive).

    Returns:
        Tuple of (canonical format name, marker byte string).

    Raises:
        InvalidParameterError: If the format is not recognised.
    """
    file_format = FORMAT_ALIASES.get(str(file_type).strip().lower())
    if file_format is None:
        raise InvalidParameterError(
            f"Unknown read file type '{file_type}'",
            details={"allowed": ", ".join(sorted(FORMAT_ALIASES))},
        )
    return file_format, FORMAT_MARKERS[file_format]


def iter_marker_reads(
    lines: Iterable[bytes], marker: FormatMarker, min_len: int, max_len: int
) -> Iterator[ReadSequence]:
    """
    Yields sequence lines that follow a record-start line.

    Args:
        lines: Lines without terminators.
        marker: Single byte that opens a record (b">" or b"@").
        min_len: Minimum read length, inclusive.
        max_len: Maximum read length, inclusive.

    Yields:
        Read sequences exactly as they appear in the file.
    """
    expecting_sequence = False
    for line in lines:
        if line[:1] == marker:
            expecting_sequence = True
        elif expecting_sequence and line and min_len <= len(line) <= max_len:
            expecting_sequence = False
            yield bytes(line)


def iter_record_reads(
    handle, file_format: str, min_len: int, max_len: int
) -> Iterator[ReadSequence]:
    """
    Yields the sequence of every complete record whose length is within bounds.

    Args:
        handle: Text handle over the read file.
        file_format: "fasta" or "fastq".
        min_len: Minimum read length, inclusive.
        max_len: Maximum read length, inclusive.
    """
    if file_format == "fastq":
        records = (seq for _title, seq, _qual in FastqGeneralIterator(handle))
    else:
        records = (seq for _title, seq in SimpleFastaParser(handle))

    for seq in records:
        if seq and min_len <= len(seq) <= max_len:
            yield seq.encode("ascii", errors="replace")


@dataclass
class FileCounts:
    """Collapsed reads of one file, as handed from a worker to the aggregator."""

    file_path: str
    counts: PerFileCounts = field(default_factory=dict)
    total: float = 0.0


def collapse_reads(reads: Iterable[ReadSequence]) -> Tuple[PerFileCounts, float]:
    """Counts identical reads. Returns the sequence -> count map and the read total."""
    counts: PerFileCounts = {}
    total = 0.0
    for read in reads:
        counts[read] = counts.get(read, 0.0) + 1.0
        total += 1.0
    return counts, total


def remove_reads_below_min(
    counts: PerFileCounts, total: float, min_count: float
) -> Tuple[PerFileCounts, float]:
    """
    Drops reads seen fewer than `min_count` times.

    Filtering only applies when min_count > 1. Removed counts are subtracted
    from the total so it stays the sum of the retained reads.
    """
    if min_count > 1:
        for read in [r for r, c in counts.items() if c < min_count]:
            total -= counts.pop(read)
    return counts, total


def rpmr_normalize(counts: PerFileCounts, total: float) -> PerFileCounts:
    """
    Reads per million reads normalization of a collapsed read library.

    Raises:
        NormalizationError: If total is not positive.
    """
    if total <= 0:
        raise NormalizationError(
            "Cannot normalize a library with no retained reads",
            details={"total": total, "distinct_reads": len(counts)},
        )
    for read, count in counts.items():
        counts[read] = RPMR_SCALE * count / total
    return counts


def count_reads(
    file_path: Union[str, pathlib.Path],
    file_type: str,
    min_len: int,
    max_len: int,
    min_count: float = 1.0,
    normalize: bool = True,
    strict: bool = False,
) -> FileCounts:
    """
    Loads one FASTA or FASTQ read file into a collapsed sequence -> count map.

    Args:
        file_path: Read file, gzip-compressed if the name ends in "gz".
        file_type: Read format, see resolve_format.
        min_len: Minimum read length, inclusive.
        max_len: Maximum read length, inclusive.
        min_count: Reads seen fewer times are removed (only when > 1).
        normalize: Convert counts to reads per million retained reads.
        strict: Parse whole records with Biopython instead of marker lines.

    Returns:
        FileCounts with the retained total (pre-normalization read count).

    Raises:
        ReadFileError: If the file cannot be opened, or is malformed in strict mode.
        DecompressionError: If gzip decompression fails.
        NormalizationError: If normalize is set and no reads were retained.
    """
    file_format, marker = resolve_format(file_type)

    with open_read_file(file_path) as handle:
        if strict:
            text = text_stream(handle)
            try:
                counts, total = collapse_reads(
                    iter_record_reads(text, file_format, min_len, max_len)
                )
            except (gzip.BadGzipFile, EOFError, zlib.error) as e:
                raise DecompressionError(
                    f"Can't decompress read file {file_path}", details={"reason": str(e)}
                ) from e
            except ValueError as e:
                raise ReadFileError(
                    f"Malformed {file_format} record in {file_path}",
                    details={"reason": str(e)},
                ) from e
        else:
            counts, total = collapse_reads(
                iter_marker_reads(
                    iter_lines(handle, file_path), marker, min_len, max_len
                )
            )

    counts, total = remove_reads_below_min(counts, total, min_count)
    if normalize:
        try:
            counts = rpmr_normalize(counts, total)
        except NormalizationError as e:
            e.details["file"] = str(file_path)
            raise

    logger.info(f"{file_path} - {format_count(total)} reads processed")
    return FileCounts(file_path=str(file_path), counts=counts, total=total)

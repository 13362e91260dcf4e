"""
Concurrent loading of replicate read files into one count table.

Each input file is collapsed by its own worker process (fastx.count_reads).
Results come back in completion order, which is not the input order, so the
column of a file is the position at which its result arrives. The same
arrival event appends the file's base name to the load order, which keeps
`load_order[i]` naming the file behind column i of every count vector.
"""

import logging
import multiprocessing as mp
import pathlib
from functools import partial
from typing import Iterable, Iterator, Optional, Sequence, Tuple, Union

from tqdm import tqdm

from .count_table import CountTable
from .exceptions import AggregationError, InvalidParameterError
from .fastx import FileCounts, count_reads, resolve_format
from .genomic_types import LoadOrder
from .utils import file_base_name, format_count

logger = logging.getLogger(__name__)

PathLike = Union[str, pathlib.Path]


def _validate_load_parameters(
    file_type: str, min_len: int, max_len: int, processes: Optional[int]
) -> str:
    """Checks load parameters before any worker is started. Returns the canonical format."""
    file_format, _ = resolve_format(file_type)
    if min_len < 0 or max_len < 0:
        raise InvalidParameterError(
            "Read length bounds must be non-negative",
            details={"min_len": min_len, "max_len": max_len},
        )
    if min_len > max_len:
        raise InvalidParameterError(
            "Minimum read length exceeds maximum read length",
            details={"min_len": min_len, "max_len": max_len},
        )
    if processes is not None and processes < 1:
        raise InvalidParameterError(
            "Number of processes must be at least 1", details={"processes": processes}
        )
    return file_format


def load_files(
    read_files: Sequence[PathLike],
    file_type: str,
    min_len: int,
    max_len: int,
    min_count: float = 1.0,
    normalize: bool = True,
    processes: Optional[int] = None,
    strict: bool = False,
) -> Iterator[FileCounts]:
    """
    Collapses every read file in its own worker and yields results as they complete.

    Args:
        read_files: Read files to load.
        file_type: Read format ("fa"/"fasta" or "fq"/"fastq").
        min_len: Minimum read length, inclusive.
        max_len: Maximum read length, inclusive.
        min_count: Per-file minimum read count (applied when > 1).
        normalize: RPMR-normalize each file.
        processes: Cap on worker processes. None runs one worker per file.
        strict: Use strict record parsing.

    Yields:
        FileCounts in completion order. A worker failure is re-raised here
        and the remaining workers are terminated.
    """
    if not read_files:
        return

    num_processes = len(read_files) if processes is None else min(processes, len(read_files))
    worker = partial(
        count_reads,
        file_type=file_type,
        min_len=min_len,
        max_len=max_len,
        min_count=min_count,
        normalize=normalize,
        strict=strict,
    )

    logger.info(
        f"Starting read loading for {len(read_files)} file(s) using {num_processes} processes."
    )
    with mp.Pool(processes=num_processes) as pool:
        for file_counts in tqdm(
            pool.imap_unordered(worker, list(read_files)),
            total=len(read_files),
            desc="Loading read files",
            unit="file",
        ):
            yield file_counts


def compile_counts(
    file_results: Iterable[FileCounts], num_files: int, min_count: float = 1.0
) -> Tuple[CountTable, LoadOrder]:
    """
    Merges per-file counts into a count table in arrival order.

    Args:
        file_results: Per-file results, in the order they become available.
        num_files: Number of results expected (columns of the table).
        min_count: When > 1, sequences missing from any file are removed
            afterwards, so no downstream statistic is computed from partial data.

    Returns:
        Tuple of (count table, load order).

    Raises:
        AggregationError: If the number of results differs from num_files.
    """
    table = CountTable(num_files)
    load_order: LoadOrder = []
    for column, file_counts in enumerate(file_results):
        if column >= num_files:
            raise AggregationError(
                "Received more file results than input files",
                details={"num_files": num_files, "file": file_counts.file_path},
            )
        load_order.append(file_base_name(file_counts.file_path))
        table.add_file_counts(column, file_counts.counts)

    if len(load_order) != num_files:
        raise AggregationError(
            "Received fewer file results than input files",
            details={"num_files": num_files, "received": len(load_order)},
        )

    if min_count > 1:
        removed = table.remove_incomplete()
        logger.debug(
            f"Removed {format_count(removed)} sequences not present in all {num_files} files"
        )
    return table, load_order


def load_reads(
    read_files: Sequence[PathLike],
    file_type: str,
    min_len: int,
    max_len: int,
    min_count: float = 1.0,
    normalize: bool = True,
    processes: Optional[int] = None,
    strict: bool = False,
) -> Tuple[CountTable, LoadOrder]:
    """
    Loads one or more replicate read files into a single count table.

    Little format checking is performed; the input files are expected to be
    correctly formatted.

    Args:
        read_files: FASTA/FASTQ read files, gzip-compressed if the name ends in "gz".
        file_type: Read format ("fa"/"fasta" or "fq"/"fastq").
        min_len: Minimum read length, inclusive.
        max_len: Maximum read length, inclusive.
        min_count: Minimum count of a read within a file; when > 1, reads
            must also be retained in every file to be kept.
        normalize: Report reads per million retained reads instead of raw counts.
        processes: Cap on worker processes. None runs one worker per file.
        strict: Parse whole records with Biopython instead of marker lines.

    Returns:
        Tuple of (count table, load order). Column i of every count vector
        holds the counts of the file named by load_order[i].

    Raises:
        InvalidParameterError: If the format or the length bounds are invalid.
        ReadFileError: If a read file cannot be opened.
        DecompressionError: If a gzip read file cannot be decompressed.
        NormalizationError: If normalization is requested for a file with no retained reads.

    Example:
        >>> table, load_order = load_reads(["rep1.fq.gz", "rep2.fq.gz"], "fq", 18, 32)
        >>> counts = table[b"TCGGACCAGGCTTCATTCCCC"]
        >>> dict(zip(load_order, counts))  # RPMR per replicate
    """
    file_format = _validate_load_parameters(file_type, min_len, max_len, processes)
    read_files = list(read_files)
    logger.info(f"Attempting to load read files in {file_format.upper()} format")

    table, load_order = compile_counts(
        load_files(
            read_files,
            file_format,
            min_len,
            max_len,
            min_count=min_count,
            normalize=normalize,
            processes=processes,
            strict=strict,
        ),
        len(read_files),
        min_count,
    )
    logger.info(
        f"Loaded {format_count(len(table))} distinct read sequences from {len(load_order)} file(s)"
    )
    return table, load_order

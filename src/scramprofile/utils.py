#!/usr/bin/env python

import gzip
import io
import pathlib
import zlib
from typing import BinaryIO, Iterator, Union

from .exceptions import DecompressionError, ReadFileError

PathLike = Union[str, pathlib.Path]


def is_gzipped_path(file_path: PathLike) -> bool:
    """Returns True when the path names a gzip file (last two characters 'gz')."""
    return str(file_path).endswith("gz")


def open_read_file(file_path: PathLike) -> BinaryIO:
    """Opens a sequence file as a binary stream, transparently handling gzip.

    Compression is inferred from the file name: any path ending in "gz"
    (".gz", ".fq.gz", ".tgz" ...) is wrapped in a gzip reader.

    Args:
        file_path: Path to the file.

    Returns:
        A binary file object positioned at the start of the (decompressed) data.

    Raises:
        ReadFileError: If the file does not exist or cannot be opened.
        TypeError: If file_path is not a str or pathlib.Path.
    """
    if not isinstance(file_path, (str, pathlib.Path)):
        raise TypeError(
            f"file_path must be a string or pathlib.Path, not {type(file_path)}"
        )

    file_path = pathlib.Path(file_path)

    if not file_path.is_file():
        raise ReadFileError(f"Can't load read file {file_path}")

    try:
        if is_gzipped_path(file_path):
            return gzip.open(file_path, mode="rb")  # type: ignore[return-value]
        return open(file_path, mode="rb")
    except OSError as e:
        raise ReadFileError(
            f"Can't load read file {file_path}", details={"reason": str(e)}
        ) from e


def iter_lines(handle: BinaryIO, file_path: PathLike) -> Iterator[bytes]:
    """Yields lines from a binary handle with line terminators removed.

    Decompression problems only surface while reading, so they are caught
    here and re-raised as DecompressionError.

    Raises:
        DecompressionError: If the gzip stream is corrupt or truncated.
    """
    try:
        for line in handle:
            yield line.rstrip(b"\r\n")
    except (gzip.BadGzipFile, EOFError, zlib.error) as e:
        raise DecompressionError(
            f"Can't decompress read file {file_path}", details={"reason": str(e)}
        ) from e


def text_stream(handle: BinaryIO) -> io.TextIOWrapper:
    """Wraps a binary handle for parsers that expect text (e.g. Biopython)."""
    return io.TextIOWrapper(handle, encoding="ascii", errors="replace", newline=None)


def file_base_name(file_path: PathLike) -> str:
    """Returns the final path component, used as the column label of a file."""
    return pathlib.PurePath(str(file_path)).name


def format_count(value: float) -> str:
    """Formats a count with thousands separators, e.g. 1234567 -> '1,234,567'."""
    return f"{int(value):,}"

import gzip
import logging
import pathlib
from typing import Callable, List, Tuple

import pytest


def fasta_text(reads: List[str]) -> str:
    return "".join(f">read_{i}\n{seq}\n" for i, seq in enumerate(reads))


def fastq_text(reads: List[str], quality_char: str = "I") -> str:
    return "".join(
        f"@read_{i}\n{seq}\n+\n{quality_char * len(seq)}\n" for i, seq in enumerate(reads)
    )


@pytest.fixture
def to_fasta() -> Callable[[List[str]], str]:
    """Renders reads as FASTA text, one header per read."""
    return fasta_text


@pytest.fixture
def to_fastq() -> Callable[..., str]:
    """Renders reads as four-line FASTQ records."""
    return fastq_text


@pytest.fixture
def write_file(tmp_path: pathlib.Path) -> Callable[[str, str], pathlib.Path]:
    """
    Factory fixture writing text content to tmp_path; names ending in "gz"
    are gzip-compressed.
    """

    def _write(name: str, content: str) -> pathlib.Path:
        file_path = tmp_path / name
        if name.endswith("gz"):
            with gzip.open(file_path, "wt") as f:
                f.write(content)
        else:
            file_path.write_text(content)
        return file_path

    return _write


@pytest.fixture
def replicate_fasta_files(write_file) -> Tuple[pathlib.Path, pathlib.Path, pathlib.Path]:
    """
    Three small replicate libraries (read lengths 10-12 nt).

    AAAAAAAAAA is in every file, CCCCCCCCCCC only in rep1/rep2 and
    GGGGGGGGGGGG only in rep3.
    """
    rep1 = write_file(
        "rep1.fa", fasta_text(["AAAAAAAAAA"] * 3 + ["CCCCCCCCCCC"] * 2)
    )
    rep2 = write_file(
        "rep2.fa", fasta_text(["AAAAAAAAAA"] * 2 + ["CCCCCCCCCCC"] * 4)
    )
    rep3 = write_file(
        "rep3.fa", fasta_text(["AAAAAAAAAA"] * 5 + ["GGGGGGGGGGGG"])
    )
    return rep1, rep2, rep3


@pytest.fixture(autouse=True)
def restore_root_logging():
    """setup_logging replaces root handlers; put the test runner's back afterwards."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)

"""
scramprofile: small RNA read loading for replicate sequencing libraries.

This package loads one or more replicate FASTA/FASTQ read files in parallel,
collapses identical reads, optionally filters and RPMR-normalizes them, and
merges the libraries into a single count table. It also loads DNA reference
sequences together with their reverse complements.
"""

__version__ = "0.1.0"

# Core classes and functions for easier access
from .count_table import CountTable
from .fastx import FileCounts, count_reads
from .loader import compile_counts, load_files, load_reads
from .output import write_count_table
from .reference import ReferenceRecord, load_reference
from .sequence import reverse_complement

__all__ = [
    "CountTable",
    "FileCounts",
    "count_reads",
    "compile_counts",
    "load_files",
    "load_reads",
    "write_count_table",
    "ReferenceRecord",
    "load_reference",
    "reverse_complement",
    "__version__",
]

#!/usr/bin/env python
"""
scramprofile command-line interface.

Loads replicate small RNA read files into one count table (and, optionally,
a reference FASTA file), reports what was loaded and writes the table when
an output prefix is given.
"""

import logging
import pathlib
import sys
from typing import Optional

import typer
from typing_extensions import Annotated

from .exceptions import ScramProfileException
from .loader import load_reads
from .logging_config import setup_logging
from .output import generate_report_string, write_count_table
from .parameter_config import (
    DEFAULT_MAX_LEN,
    DEFAULT_MIN_COUNT,
    DEFAULT_MIN_LEN,
    ReadLoadArgs,
)
from .reference import load_reference

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, pretty_exceptions_show_locals=False)


def run_profile(args: ReadLoadArgs) -> Optional[pathlib.Path]:
    """Loads reads (and the reference, if given) and writes the count table."""
    if args.ref_file is not None:
        load_reference(args.ref_file, strict=args.strict)

    table, load_order = load_reads(**args.load_kwargs())
    logger.info("Load summary:\n" + generate_report_string(table, load_order))

    if args.out_prefix is None:
        return None
    return write_count_table(
        table, load_order, pathlib.Path(f"{args.out_prefix}_counts.csv")
    )


@app.command(
    help="Load replicate read files into a per-sequence count table."
)
def main(
    read_files: Annotated[
        str,
        typer.Option(
            "--read-files",
            help="Comma-separated read files (FASTA/FASTQ, optionally gzipped).",
        ),
    ],
    read_file_type: Annotated[
        str, typer.Option(help="Read file type - fastq or fasta.")
    ] = "fastq",
    ref_file: Annotated[
        Optional[pathlib.Path],
        typer.Option(help="Path to a FASTA format reference file."),
    ] = None,
    out_prefix: Annotated[
        Optional[pathlib.Path],
        typer.Option(help="Output folder/file prefix; writes <prefix>_counts.csv."),
    ] = None,
    min_len: Annotated[
        int, typer.Option(help="Minimum read length to load.")
    ] = DEFAULT_MIN_LEN,
    max_len: Annotated[
        int, typer.Option(help="Maximum read length to load.")
    ] = DEFAULT_MAX_LEN,
    min_count: Annotated[
        float, typer.Option(help="Minimum abundance of a read in each file.")
    ] = DEFAULT_MIN_COUNT,
    norm: Annotated[
        bool,
        typer.Option(
            "--norm/--no-norm",
            help="Normalise reads to Reads Per Million Reads (RPMR) for each file.",
        ),
    ] = True,
    procs: Annotated[
        Optional[int],
        typer.Option(help="Maximum number of worker processes (default: one per file)."),
    ] = None,
    strict: Annotated[
        bool,
        typer.Option(
            "--strict",
            help="Parse whole FASTA/FASTQ records and reject uncomplementable reference bases.",
        ),
    ] = False,
    log_level: Annotated[str, typer.Option(help="Logging level.")] = "INFO",
    log_file: Annotated[
        Optional[pathlib.Path], typer.Option(help="Optional rotating log file.")
    ] = None,
):
    """
    Main CLI entry point.
    Uses Typer for argument parsing and Pydantic for validation.
    """
    try:
        setup_logging(log_level=log_level, log_file=log_file)
    except ValueError as ve:
        print(f"Error: {ve}", file=sys.stderr)
        raise typer.Exit(code=1)

    try:
        args = ReadLoadArgs(
            read_files=read_files,
            read_file_type=read_file_type,
            ref_file=ref_file,
            out_prefix=out_prefix,
            min_len=min_len,
            max_len=max_len,
            min_count=min_count,
            normalize=norm,
            procs=procs,
            strict=strict,
        )
        written = run_profile(args)

    except ScramProfileException as e:
        logger.critical(f"scramprofile failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        raise typer.Exit(code=1)
    except ValueError as ve:  # Catch Pydantic validation errors specifically
        logger.critical(f"Configuration error: {ve}", exc_info=False)
        print(f"Error: {ve}", file=sys.stderr)
        raise typer.Exit(code=1)
    except Exception as e:
        logger.critical(f"A critical error occurred: {e}", exc_info=True)
        raise typer.Exit(code=1)

    if written is not None:
        typer.echo(f"Count table written to {written}")


if __name__ == "__main__":
    app()

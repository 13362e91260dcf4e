# =============================================================================
# scramprofile/output.py - Count table export and reporting
# =============================================================================
"""
Output formatting for loaded read count tables.
"""

import logging
import pathlib
from typing import List, Union

import pandas as pd

from .count_table import CountTable
from .exceptions import OutputWriteError
from .genomic_types import LoadOrder
from .utils import format_count

logger = logging.getLogger(__name__)

TABLE_SEPARATORS = {".csv": ",", ".tsv": "\t", ".txt": "\t"}


def write_count_table(
    table: CountTable, load_order: LoadOrder, output_path: Union[str, pathlib.Path]
) -> pathlib.Path:
    """
    Writes a count table to disk, one row per sequence and one column per file.

    The format follows the suffix: ".csv", ".tsv"/".txt" (tab separated) or
    ".parquet". Columns appear in load order.

    Args:
        table: Count table from load_reads.
        load_order: Column labels from load_reads.
        output_path: Destination file.

    Returns:
        The path written.

    Raises:
        OutputWriteError: If the suffix is unsupported or writing fails.
    """
    output_path = pathlib.Path(output_path)
    suffix = output_path.suffix.lower()
    if suffix not in TABLE_SEPARATORS and suffix != ".parquet":
        raise OutputWriteError(
            f"Unsupported count table format '{suffix or output_path.name}'",
            details={"supported": ".csv, .tsv, .txt, .parquet"},
        )

    df = table.to_dataframe(load_order)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        if suffix == ".parquet":
            df.to_parquet(output_path, index=True)
        else:
            df.to_csv(output_path, sep=TABLE_SEPARATORS[suffix], index=True)
    except (OSError, ValueError, ImportError) as e:
        raise OutputWriteError(
            f"Failed to write count table to {output_path}", details={"reason": str(e)}
        ) from e

    logger.info(f"Count table ({format_count(len(table))} sequences) saved to: {output_path}")
    return output_path


def summarize_count_table(table: CountTable, load_order: LoadOrder) -> pd.DataFrame:
    """Per-file summary: distinct sequences present and summed counts, in load order."""
    df = table.to_dataframe(load_order)
    return pd.DataFrame(
        {
            "distinct_sequences": (df > 0).sum(axis=0).astype(int).to_numpy(),
            "total_count": df.sum(axis=0).to_numpy(),
        },
        index=pd.Index(list(load_order), name="file"),
    )


def generate_report_string(table: CountTable, load_order: LoadOrder) -> str:
    """
    Generates a human-readable summary of a count table.
    Example: "rep1.fq: 1,204 sequences, 1,000,000 counts"
    """
    if not load_order:
        return "No read files loaded."

    summary = summarize_count_table(table, load_order)
    report_lines: List[str] = [
        f"{file_name}: {format_count(row.distinct_sequences)} sequences, "
        f"{format_count(round(row.total_count))} counts"
        for file_name, row in zip(load_order, summary.itertuples(index=False))
    ]
    report_lines.append(f"Total distinct sequences: {format_count(len(table))}")
    return "\n".join(report_lines)

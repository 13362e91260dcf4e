"""
Arena-backed table of per-file read counts.

Rows live in one float64 matrix of shape (capacity, num_files) that grows by
doubling; a dict maps each read sequence to its row. A row is zeroed when its
sequence is first seen, so an untouched cell reads 0.0 ("absent in that
file").
"""

from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np
import pandas as pd

from .exceptions import AggregationError
from .genomic_types import CountVector, ReadSequence

DEFAULT_INITIAL_CAPACITY = 1024


class CountTable:
    """
    Mapping of read sequence -> count vector with one column per input file.

    Only the aggregating process writes to a table. Lookups return copies so
    callers cannot modify the arena through them.

    Attributes:
        num_files: Number of columns (input files).
    """

    def __init__(
        self, num_files: int, initial_capacity: int = DEFAULT_INITIAL_CAPACITY
    ) -> None:
        if num_files < 0:
            raise ValueError(f"num_files must be non-negative, got {num_files}.")
        self.num_files = num_files
        self._row_index: Dict[ReadSequence, int] = {}
        self._matrix = np.zeros((max(initial_capacity, 1), num_files), dtype=np.float64)

    def __len__(self) -> int:
        return len(self._row_index)

    def __contains__(self, sequence: object) -> bool:
        return sequence in self._row_index

    def __iter__(self) -> Iterator[ReadSequence]:
        return iter(self._row_index)

    def __getitem__(self, sequence: ReadSequence) -> CountVector:
        return self._matrix[self._row_index[sequence]].copy()

    def get(
        self, sequence: ReadSequence, default: Optional[CountVector] = None
    ) -> Optional[CountVector]:
        if sequence not in self._row_index:
            return default
        return self[sequence]

    def items(self) -> Iterator[Tuple[ReadSequence, CountVector]]:
        for sequence, row in self._row_index.items():
            yield sequence, self._matrix[row].copy()

    def _row_for(self, sequence: ReadSequence) -> int:
        """Returns the row of `sequence`, allocating a zeroed one on first sight."""
        row = self._row_index.get(sequence)
        if row is None:
            row = len(self._row_index)
            if row == self._matrix.shape[0]:
                grown = np.zeros(
                    (self._matrix.shape[0] * 2, self.num_files), dtype=np.float64
                )
                grown[:row] = self._matrix
                self._matrix = grown
            self._row_index[sequence] = row
        return row

    def set_count(self, sequence: ReadSequence, column: int, count: float) -> None:
        """Writes the count of `sequence` in file column `column`."""
        if not 0 <= column < self.num_files:
            raise AggregationError(
                "Column index out of range",
                details={"column": column, "num_files": self.num_files},
            )
        self._matrix[self._row_for(sequence), column] = count

    def add_file_counts(self, column: int, counts: Dict[ReadSequence, float]) -> None:
        """Merges one file's sequence -> count map into column `column`."""
        for sequence, count in counts.items():
            self.set_count(sequence, column, count)

    def column(self, column: int) -> CountVector:
        """Counts of every sequence in one file column, in row (first-seen) order."""
        return self._matrix[: len(self._row_index), column].copy()

    def remove_incomplete(self) -> int:
        """
        Removes every sequence with a 0.0 count in any column.

        Surviving rows are compacted to the front of the arena, keeping their
        relative order.

        Returns:
            Number of sequences removed.
        """
        size = len(self._row_index)
        used = self._matrix[:size]
        keep = np.all(used != 0.0, axis=1)
        removed = int(size - keep.sum())
        if removed == 0:
            return 0

        sequences = list(self._row_index)
        kept_sequences = [seq for seq, k in zip(sequences, keep) if k]
        compacted = np.zeros_like(self._matrix)
        compacted[: len(kept_sequences)] = used[keep]
        self._matrix = compacted
        self._row_index = {seq: i for i, seq in enumerate(kept_sequences)}
        return removed

    def to_dataframe(self, load_order: List[str]) -> pd.DataFrame:
        """
        Converts the table to a DataFrame (rows = sequences, columns = files).

        Args:
            load_order: Column labels; must name every column.

        Raises:
            AggregationError: If load_order does not have one label per column.
        """
        if len(load_order) != self.num_files:
            raise AggregationError(
                "Load order does not match the number of table columns",
                details={"labels": len(load_order), "num_files": self.num_files},
            )
        try:
            index = [seq.decode("ascii") for seq in self._row_index]
        except UnicodeDecodeError:
            index = list(self._row_index)  # leave as bytes if non-ASCII appear
        df = pd.DataFrame(
            self._matrix[: len(self._row_index)].copy(),
            index=pd.Index(index, name="sequence"),
            columns=list(load_order),
        )
        return df

"""
Pytest unit tests for the arena-backed CountTable.
"""

import numpy as np
import pandas as pd
import pytest

from scramprofile.count_table import CountTable
from scramprofile.exceptions import AggregationError


@pytest.fixture
def three_file_table() -> CountTable:
    table = CountTable(3)
    table.add_file_counts(0, {b"AAA": 1.0, b"CCC": 2.0})
    table.add_file_counts(1, {b"AAA": 3.0, b"GGG": 4.0})
    table.add_file_counts(2, {b"AAA": 5.0, b"CCC": 6.0})
    return table


def test_unseen_columns_default_to_zero(three_file_table: CountTable):
    np.testing.assert_array_equal(three_file_table[b"AAA"], [1.0, 3.0, 5.0])
    np.testing.assert_array_equal(three_file_table[b"CCC"], [2.0, 0.0, 6.0])
    np.testing.assert_array_equal(three_file_table[b"GGG"], [0.0, 4.0, 0.0])


def test_mapping_protocol(three_file_table: CountTable):
    assert len(three_file_table) == 3
    assert b"AAA" in three_file_table
    assert b"TTT" not in three_file_table
    assert list(three_file_table) == [b"AAA", b"CCC", b"GGG"]
    assert three_file_table.get(b"TTT") is None
    with pytest.raises(KeyError):
        three_file_table[b"TTT"]


def test_every_vector_has_one_slot_per_file(three_file_table: CountTable):
    for _, vector in three_file_table.items():
        assert vector.shape == (3,)
        assert vector.dtype == np.float64


def test_lookups_return_copies(three_file_table: CountTable):
    vector = three_file_table[b"AAA"]
    vector[0] = 99.0
    assert three_file_table[b"AAA"][0] == 1.0


def test_arena_grows_past_initial_capacity():
    table = CountTable(2, initial_capacity=2)
    sequences = [f"SEQ{i}".encode() for i in range(100)]
    table.add_file_counts(0, {seq: float(i + 1) for i, seq in enumerate(sequences)})
    table.set_count(sequences[-1], 1, 7.0)

    assert len(table) == 100
    assert table[sequences[0]][0] == 1.0
    np.testing.assert_array_equal(table[sequences[-1]], [100.0, 7.0])
    assert table.column(0).sum() == sum(range(1, 101))


def test_set_count_column_out_of_range():
    table = CountTable(2)
    with pytest.raises(AggregationError, match="Column index out of range"):
        table.set_count(b"AAA", 2, 1.0)


def test_negative_num_files():
    with pytest.raises(ValueError):
        CountTable(-1)


def test_remove_incomplete(three_file_table: CountTable):
    removed = three_file_table.remove_incomplete()

    assert removed == 2
    assert list(three_file_table) == [b"AAA"]
    np.testing.assert_array_equal(three_file_table[b"AAA"], [1.0, 3.0, 5.0])
    # The arena stays usable after compaction.
    three_file_table.set_count(b"TTT", 1, 2.0)
    np.testing.assert_array_equal(three_file_table[b"TTT"], [0.0, 2.0, 0.0])


def test_remove_incomplete_keeps_complete_rows_in_order():
    table = CountTable(2)
    table.add_file_counts(0, {b"A": 1.0, b"B": 1.0, b"C": 1.0, b"D": 1.0})
    table.add_file_counts(1, {b"A": 2.0, b"C": 2.0, b"D": 2.0})
    assert table.remove_incomplete() == 1
    assert list(table) == [b"A", b"C", b"D"]
    np.testing.assert_array_equal(table.column(1), [2.0, 2.0, 2.0])


def test_to_dataframe(three_file_table: CountTable):
    df = three_file_table.to_dataframe(["rep1.fa", "rep2.fa", "rep3.fa"])

    assert isinstance(df, pd.DataFrame)
    assert list(df.columns) == ["rep1.fa", "rep2.fa", "rep3.fa"]
    assert df.index.name == "sequence"
    assert df.loc["CCC", "rep3.fa"] == 6.0
    assert df.loc["GGG", "rep1.fa"] == 0.0


def test_to_dataframe_requires_one_label_per_column(three_file_table: CountTable):
    with pytest.raises(AggregationError):
        three_file_table.to_dataframe(["rep1.fa"])


def test_empty_table():
    table = CountTable(0)
    assert len(table) == 0
    assert table.remove_incomplete() == 0
    assert table.to_dataframe([]).empty

import pathlib

import pytest
from pydantic import ValidationError

from scramprofile.parameter_config import ReadLoadArgs


@pytest.fixture
def two_read_files(tmp_path: pathlib.Path):
    paths = [tmp_path / "rep1.fq", tmp_path / "rep2.fq"]
    for path in paths:
        path.write_text("@r\nACGTACGTACGTACGTACGT\n+\nIIIIIIIIIIIIIIIIIIII\n")
    return paths


def test_defaults_applied(two_read_files):
    args = ReadLoadArgs(read_files=two_read_files)
    assert args.read_file_type == "fastq"
    assert (args.min_len, args.max_len) == (18, 32)
    assert args.min_count == 1.0
    assert args.normalize is True
    assert args.procs is None
    assert args.strict is False


def test_comma_separated_read_files(two_read_files):
    args = ReadLoadArgs(read_files=",".join(str(p) for p in two_read_files))
    assert args.read_files == two_read_files


def test_missing_read_file(tmp_path: pathlib.Path):
    with pytest.raises(ValidationError):
        ReadLoadArgs(read_files=[tmp_path / "missing.fq"])


def test_empty_read_files():
    with pytest.raises(ValidationError):
        ReadLoadArgs(read_files="")


def test_min_len_above_max_len(two_read_files):
    with pytest.raises(ValidationError, match="must not exceed max_len"):
        ReadLoadArgs(read_files=two_read_files, min_len=30, max_len=20)


@pytest.mark.parametrize(
    "field, value",
    [("read_file_type", "bam"), ("min_len", -1), ("min_count", -2.0), ("procs", 0)],
)
def test_invalid_values(two_read_files, field: str, value):
    with pytest.raises(ValidationError):
        ReadLoadArgs(read_files=two_read_files, **{field: value})


def test_load_kwargs(two_read_files):
    args = ReadLoadArgs(
        read_files=two_read_files, read_file_type="fa", min_count=2, normalize=False, procs=1
    )
    assert args.load_kwargs() == {
        "read_files": two_read_files,
        "file_type": "fa",
        "min_len": 18,
        "max_len": 32,
        "min_count": 2.0,
        "normalize": False,
        "processes": 1,
        "strict": False,
    }

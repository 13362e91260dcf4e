import pathlib
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, FilePath, field_validator, model_validator

DEFAULT_MIN_LEN = 18
DEFAULT_MAX_LEN = 32
DEFAULT_MIN_COUNT = 1.0


class ReadLoadArgs(BaseModel):
    """Pydantic model for validating the parameters of a read loading run."""

    read_files: List[FilePath] = Field(
        min_length=1,
        description="Read files (FASTA/FASTQ, possibly gzipped); a comma-separated string is split.",
    )
    read_file_type: Literal["fastq", "fasta", "fq", "fa"] = Field(
        default="fastq", description="Read file format."
    )
    ref_file: Optional[FilePath] = Field(
        default=None, description="Reference FASTA file."
    )
    out_prefix: Optional[pathlib.Path] = Field(
        default=None, description="Output folder/file prefix."
    )
    min_len: int = Field(
        default=DEFAULT_MIN_LEN, ge=0, description="Minimum read length to load."
    )
    max_len: int = Field(
        default=DEFAULT_MAX_LEN, ge=0, description="Maximum read length to load."
    )
    min_count: float = Field(
        default=DEFAULT_MIN_COUNT,
        ge=0,
        description="Minimum abundance of a read within each file.",
    )
    normalize: bool = Field(
        default=True, description="Normalise counts to Reads Per Million Reads (RPMR)."
    )
    procs: Optional[int] = Field(
        default=None, gt=0, description="Cap on worker processes (default: one per file)."
    )
    strict: bool = Field(
        default=False, description="Parse whole FASTA/FASTQ records instead of marker lines."
    )

    @field_validator("read_files", mode="before")
    @classmethod
    def split_comma_separated(cls, v: Union[str, List[Any]]) -> List[Any]:
        """Accepts "a.fq,b.fq" as well as a list of paths."""
        if isinstance(v, (str, pathlib.Path)):
            v = [part.strip() for part in str(v).split(",") if part.strip()]
        return v

    @model_validator(mode="after")
    def check_length_bounds(self) -> "ReadLoadArgs":
        if self.min_len > self.max_len:
            raise ValueError(
                f"min_len ({self.min_len}) must not exceed max_len ({self.max_len})."
            )
        return self

    def load_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for loader.load_reads."""
        return {
            "read_files": list(self.read_files),
            "file_type": self.read_file_type,
            "min_len": self.min_len,
            "max_len": self.max_len,
            "min_count": self.min_count,
            "normalize": self.normalize,
            "processes": self.procs,
            "strict": self.strict,
        }

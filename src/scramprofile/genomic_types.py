"""
Type definitions for the scramprofile package.

This module centralizes common type aliases used throughout the package
to keep signatures consistent between the parser, the loader and the
count table.
"""

from typing import Dict, List

import numpy as np
import numpy.typing as npt

# Type aliases for clarity
ReadSequence = bytes  # A read sequence exactly as it appears in the file.
FormatMarker = bytes  # Single byte that opens a record (b">" or b"@").
PerFileCounts = Dict[
    ReadSequence, float
]  # Maps a read sequence to its (raw or RPMR) count in one file.
CountVector = npt.NDArray[
    np.float64
]  # One count per input file, indexed by arrival position.
LoadOrder = List[str]  # File base names, index i names column i.

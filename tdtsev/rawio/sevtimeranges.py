"""
Conversion of time windows (in seconds) into positions inside the chunk
files of a stream.

A stream is cut into chunks (one file per hour and channel). Chunks are
addressed by their position in the sorted list of chunk indices of the
stream; `chunk_sizes[k]` is the number of samples held by the chunk at
position k. Sample positions are found against the cumulative chunk sizes,
so a shorter chunk anywhere in the list is handled exactly.
"""

from __future__ import annotations

import math
from typing import NamedTuple

import numpy as np


class ResolvedRange(NamedTuple):
    start_sample: int  # 1-based, inclusive
    end_sample: int  # 1-based, inclusive
    start_chunk: int  # position in the sorted chunk list
    end_chunk: int
    start_offset: int  # first sample to read inside start_chunk
    end_offset: int  # one past the last sample to read inside end_chunk

    @property
    def sample_count(self):
        return max(self.end_sample - self.start_sample + 1, 0)


def stream_chunk_sizes(files: np.ndarray, channels) -> tuple[np.ndarray, np.ndarray]:
    """
    Sorted chunk indices of the given channels and, for each of them,
    the largest sample count found among these channels.

    Parameters
    ----------
    files: np.ndarray
        rows of `_chunk_file_dtype` of one stream
    channels: list[int]
        the channels taken into account
    """
    files = files[np.isin(files["channel"], channels)]
    chunks = np.unique(files["chunk"])
    sizes = np.zeros(chunks.size, dtype="int64")
    for k, chunk in enumerate(chunks):
        sizes[k] = files[files["chunk"] == chunk]["npts"].max()
    return chunks, sizes


def has_uniform_chunk_sizes(chunk_sizes) -> bool:
    """All chunks but the last one hold the same number of samples."""
    return np.unique(np.asarray(chunk_sizes)[:-1]).size <= 1


def resolve_sample_range(i_start: int, i_stop: int, chunk_sizes) -> ResolvedRange:
    """
    Locate the 0-based half open sample range [i_start, i_stop) in the chunks.

    The range is clipped to the recording. An empty range gives
    `sample_count == 0` and an empty chunk walk (end_chunk < start_chunk).
    """
    bounds = np.concatenate([[0], np.cumsum(chunk_sizes, dtype="int64")])
    total = int(bounds[-1])
    i_start = max(int(i_start), 0)
    i_stop = min(int(i_stop), total)

    if i_stop <= i_start:
        return ResolvedRange(i_start + 1, i_start, 0, -1, 0, 0)

    start_chunk = int(np.searchsorted(bounds, i_start, side="right")) - 1
    end_chunk = int(np.searchsorted(bounds, i_stop - 1, side="right")) - 1
    start_offset = i_start - int(bounds[start_chunk])
    end_offset = i_stop - int(bounds[end_chunk])
    return ResolvedRange(i_start + 1, i_stop, start_chunk, end_chunk, start_offset, end_offset)


def resolve_time_range(t1: float, t2: float, sampling_rate: float, chunk_sizes) -> ResolvedRange:
    """
    Locate the time window [t1, t2) in seconds. `t2 = inf` reads to the end.

    First sample is ceil(t1 * fs), samples are taken while index < floor(t2 * fs).
    """
    total = int(np.sum(chunk_sizes))
    i_start = max(math.ceil(t1 * sampling_rate), 0)
    if math.isinf(t2):
        i_stop = total
    else:
        i_stop = min(max(math.floor(t2 * sampling_rate), 0), total)
    return resolve_sample_range(i_start, i_stop, chunk_sizes)


def resolve_time_ranges(time_ranges, sampling_rate: float, chunk_sizes) -> list[ResolvedRange]:
    return [resolve_time_range(t1, t2, sampling_rate, chunk_sizes) for t1, t2 in time_ranges]

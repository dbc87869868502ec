"""
Options of a SEV read call.

The set of options is closed: `SevReadOptions.from_kwargs` refuses any
name that is not a field, and every value is checked when the options are
built, before a single file is opened.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
import math
import numbers

import numpy as np

from tdtsev.rawio.sevcatalog import remote_source_path
from tdtsev.rawio.sevexceptions import SevConfigurationError


def _is_number(value):
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


@dataclass(frozen=True)
class SevReadOptions:
    """
    Parameters
    ----------
    t1: float, default: 0.
        retrieve data starting at t1 seconds
    t2: float, default: 0.
        retrieve data ending at t2 seconds, 0 for the end of the recording
    channel: int | None, default: None
        read this channel only, None (or 0) for all channels
    ranges: list of (t1, t2) | array, default: None
        time windows in seconds, overrides t1/t2. A 2 x N array (one window
        per column) is accepted as well as a list of pairs.
    just_names: bool, default: False
        only return the event names found
    event_name: str, default: ''
        read this store only
    verbose: bool, default: False
        log every file read at INFO level
    fs: float, default: 0.
        sampling rate override, 0 uses the header value
    device, tank, block: str, default: ''
        read a block from a streamer device share, all three are required
    """

    t1: float = 0.0
    t2: float = 0.0
    channel: int | None = None
    ranges: tuple | None = None
    just_names: bool = False
    event_name: str = ""
    verbose: bool = False
    fs: float = 0.0
    device: str = ""
    tank: str = ""
    block: str = ""

    @classmethod
    def from_kwargs(cls, **kwargs):
        valid = [f.name for f in fields(cls)]
        for name in kwargs:
            if name not in valid:
                raise SevConfigurationError(f"{name} is not a valid parameter, valid parameters are {valid}")
        return cls(**kwargs)

    def __post_init__(self):
        for name in ("t1", "t2", "fs"):
            value = getattr(self, name)
            if not _is_number(value) or math.isnan(value):
                raise SevConfigurationError(f"{name} must be a number, not {value!r}")
        if math.isinf(self.t1):
            raise SevConfigurationError(f"t1 must be finite, not {self.t1}")
        if self.fs < 0 or math.isinf(self.fs):
            raise SevConfigurationError(f"fs must be a positive finite number, not {self.fs}")

        if self.channel is not None:
            if not isinstance(self.channel, numbers.Integral) or isinstance(self.channel, bool) or self.channel < 0:
                raise SevConfigurationError(f"channel must be a positive integer, not {self.channel!r}")
            # 0 historically means all channels
            object.__setattr__(self, "channel", int(self.channel) if self.channel > 0 else None)

        for name in ("event_name", "device", "tank", "block"):
            if not isinstance(getattr(self, name), str):
                raise SevConfigurationError(f"{name} must be a string, not {getattr(self, name)!r}")
        for name in ("just_names", "verbose"):
            if not isinstance(getattr(self, name), (bool, np.bool_, int)):
                raise SevConfigurationError(f"{name} must be a boolean, not {getattr(self, name)!r}")

        remote_source_path(self.device, self.tank, self.block)

        if self.ranges is not None:
            object.__setattr__(self, "ranges", _normalize_ranges(self.ranges))

    def time_ranges(self):
        """The windows to read as a list of (t1, t2), t2 = inf for the end of the recording."""
        if self.ranges:
            return list(self.ranges)
        t2 = self.t2 if self.t2 > 0 else math.inf
        return [(float(self.t1), float(t2))]


def _normalize_ranges(ranges):
    try:
        arr = np.asarray(ranges, dtype="float64")
    except (TypeError, ValueError) as e:
        raise SevConfigurationError(f"ranges must be numeric time windows: {e}") from e

    if arr.size == 0:
        return None
    if arr.ndim != 2 or 2 not in arr.shape:
        raise SevConfigurationError(f"ranges must be a list of (t1, t2) pairs or a 2 x N array, not shape {arr.shape}")
    if np.any(np.isnan(arr)):
        raise SevConfigurationError("ranges can not contain NaN")
    pairs = arr if arr.shape[1] == 2 else arr.T
    if np.any(np.isinf(pairs[:, 0])):
        raise SevConfigurationError("range starts must be finite")
    return tuple((float(t1), float(t2)) for t1, t2 in pairs)

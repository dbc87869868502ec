from __future__ import annotations

from enum import IntEnum
from pathlib import Path
import re

import numpy as np

from .sevcatalog import event_name_from_filename, parse_sev_filename
from .sevexceptions import SevFormatError


class SevVersion(IntEnum):
    """Known SEV header layouts."""

    HEADERLESS = 0  # written by OpenEx before v2.18, header left empty
    V1 = 1
    V2 = 2
    V3 = 3


# index is the low 3 bits of the format code
SEV_FORMATS = ["float32", "int32", "int16", "int8", "float64", "int64"]

BASE_CLOCK = 25_000_000.0  # Hz
HEADERLESS_FORMAT = "float32"
HEADERLESS_SAMPLING_RATE = 24414.0625  # Hz

SevStreamHeader = [
    ("file_size", "<u8"),
    ("file_type", "S3"),
    ("version", "u1"),
    ("event_name", "S4"),
    ("channel", "<u2"),
    ("total_channels", "<u2"),
    ("sample_width", "<u2"),
    ("reserved1", "<u2"),
    ("format_code", "u1"),
    ("decimate", "u1"),
    ("rate", "<u2"),
    ("reserved2", "S12"),
]


def read_as_dict(fid, dtype, offset=None):
    """
    Given a file descriptor
    and a numpy.dtype of the binary struct return a dict.
    Make conversion for strings and integers.
    """
    if offset is not None:
        fid.seek(offset)
    dt = np.dtype(dtype)
    buf = fid.read(dt.itemsize)
    if len(buf) < dt.itemsize:
        raise SevFormatError(f"{fid.name} is too short to hold a {dt.itemsize} bytes header")
    h = np.frombuffer(buf, dt)[0]
    info = {}
    for k in dt.names:
        v = h[k]
        if dt[k].kind == "S":
            v = v.replace(b"\x00", b"").decode("latin-1")
        elif dt[k].kind in "ui":
            v = int(v)
        info[k] = v
    return info


def _embedded_event_name(header, stem):
    return header["event_name"]


def _filename_event_name(header, stem):
    # OpenEx and RS4 disagreed on the byte order of this field before v3
    header["legacy_event_name"] = header["event_name"]
    return event_name_from_filename(stem)


_event_name_readers = {
    SevVersion.V1: _filename_event_name,
    SevVersion.V2: _filename_event_name,
    SevVersion.V3: _embedded_event_name,
}


class SevHeader(dict):
    """
    Content of the 40 bytes header of one SEV file.

    Beside the raw fields of `SevStreamHeader` the dict holds the derived
    entries used to read the samples: 'event_name', 'channel', 'dtype',
    'sampling_rate' and 'headerless'.

    Problems that do not prevent reading are collected in `self.warnings`.
    """

    def __init__(self, filename):
        super().__init__()
        self.warnings = []
        self.filename = str(filename)
        stem = Path(filename).stem

        with open(filename, "rb") as fid:
            self.update(read_as_dict(fid, SevStreamHeader, offset=0))

        if self["file_size"] == 0 or self["version"] == SevVersion.HEADERLESS:
            self._set_headerless(stem)
            return

        read_event_name = _event_name_readers.get(self["version"])
        if read_event_name is None:
            raise SevFormatError(f"{self.filename}: unknown version {self['version']}")
        self["event_name"] = read_event_name(self, stem)
        self["headerless"] = False

        code = self["format_code"] & 7
        if code >= len(SEV_FORMATS):
            raise SevFormatError(f"{self.filename}: unknown data format code {self['format_code']}")
        self["dtype"] = SEV_FORMATS[code]

        if self["decimate"] == 0:
            raise SevFormatError(f"{self.filename}: decimation factor is 0")
        self["sampling_rate"] = sampling_rate_from_header(self["rate"], self["decimate"])

        self._check_consistency()

    def _set_headerless(self, stem):
        channel, _, event_name = parse_sev_filename(stem)
        if channel < 0:
            digits = re.findall(r"\d+", stem.split("_")[-1])
            channel = int(digits[0]) if digits else 0
        self["event_name"] = event_name
        self["channel"] = channel
        self["dtype"] = HEADERLESS_FORMAT
        self["sampling_rate"] = HEADERLESS_SAMPLING_RATE
        self["headerless"] = True
        self.warnings.append(
            f"{Path(self.filename).name} has empty header; assuming {event_name} ch {channel} "
            f"format {HEADERLESS_FORMAT} and fs = {HEADERLESS_SAMPLING_RATE}\n"
            "upgrade to OpenEx v2.18 or above"
        )

    def _check_consistency(self):
        name = Path(self.filename).name
        if self["file_type"].upper() != "SEV":
            self.warnings.append(f"{name}: unexpected file type {self['file_type']!r}")

        actual_size = Path(self.filename).stat().st_size
        if self["file_size"] != actual_size:
            self.warnings.append(
                f"{name}: header size mismatch, header says {self['file_size']} bytes "
                f"but file has {actual_size} bytes"
            )

        width = np.dtype(self["dtype"]).itemsize
        if self["sample_width"] != width:
            self.warnings.append(
                f"{name}: header sample width is {self['sample_width']} bytes, "
                f"{self['dtype']} samples are {width} bytes"
            )


def sampling_rate_from_header(rate: int, decimate: int) -> float:
    """fs = 2 ** (rate - 12) * 25 MHz / decimate"""
    return 2.0 ** (int(rate) - 12) * BASE_CLOCK / int(decimate)


def sanitize_name(name: str) -> str:
    """
    Turn an event name into a valid identifier: a leading digit becomes 'x'
    and any other character that is neither a letter nor a digit becomes '_'.
    """
    if not name:
        return name
    varname = re.sub(r"[^A-Za-z0-9]", "_", name)
    if varname[0].isdigit():
        varname = "x" + varname[1:]
    return varname

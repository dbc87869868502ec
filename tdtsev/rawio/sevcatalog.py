"""
Discovery of the files that make up a SEV recording.

A SEV store is written as one file per channel and, for long recordings,
one file per hour of acquisition. The file names carry the information
needed to put them back together, for instance::

    Subject1-230101_Wav1_ch1.sev        hour 0 of channel 1 of store "Wav1"
    Subject1-230101_Wav1_ch1-1h.sev     hour 1 of channel 1 of store "Wav1"

"""

from __future__ import annotations

import os
import re
from pathlib import Path

import numpy as np

from .sevexceptions import SevConfigurationError, SevFormatError

SEV_HEADER_SIZE = 40  # bytes, 10 words of 4 bytes

_channel_pat = re.compile(r"_ch(\d+)", re.IGNORECASE)
_chunk_pat = re.compile(r"-(\d+)h")

_chunk_file_dtype = [
    ("filename", "U256"),
    ("size", "int64"),
    ("version", "uint8"),
    ("channel", "int64"),  # -1 until known
    ("chunk", "int64"),
    ("data_size", "int64"),
    ("dtype", "U16"),
    ("sample_width", "int64"),
    ("decimate", "int64"),
    ("rate", "int64"),
    ("sampling_rate", "float64"),
    ("event_name", "U64"),
    ("var_name", "U64"),
    ("npts", "int64"),
]


def remote_source_path(device: str = "", tank: str = "", block: str = "") -> str | None:
    """
    Build the network share path of a block stored on a streamer device.

    Returns None when none of device/tank/block is given.
    """
    given = [bool(device), bool(tank), bool(block)]
    if not any(given):
        return None
    if not all(given):
        raise SevConfigurationError("device, tank and block must all be specified")
    return f"\\\\{device}\\data\\{tank}\\{block}\\"


def parse_sev_filename(stem: str):
    """
    Extract channel, chunk (hour) and event name from a file name without extension.

    Returns
    -------
    channel: int
        -1 when there is no `_ch<n>` token
    chunk: int
        0 when there is no `-<n>h` token
    event_name: str
        second to last `_` separated part, or the whole stem
    """
    matches = _channel_pat.findall(stem)
    channel = int(matches[-1]) if matches else -1

    matches = _chunk_pat.findall(stem)
    chunk = int(matches[-1]) if matches else 0

    return channel, chunk, event_name_from_filename(stem)


def event_name_from_filename(stem: str) -> str:
    parts = stem.split("_")
    if len(parts) > 1:
        return parts[-2]
    return stem


def scan_sev_files(source) -> tuple[str, list[str]]:
    """
    List the SEV files of a source.

    Parameters
    ----------
    source: str | Path
        A single file or a directory holding `*.sev` files

    Returns
    -------
    dirname: str
        The directory the files live in
    filenames: list[str]
        File names relative to dirname, sorted. Empty if the source
        is neither a file nor a directory, or holds no SEV file.
    """
    source = Path(source)
    if source.is_file():
        return str(source.parent), [source.name]
    if source.is_dir():
        filenames = sorted(
            entry.name
            for entry in os.scandir(source)
            if entry.is_file() and entry.name.lower().endswith(".sev") and not entry.name.startswith("._")
        )
        return str(source), filenames
    return str(source), []


def _check_length(catalog, field, value):
    # numpy silently truncates strings longer than the field
    width = catalog.dtype[field].itemsize // np.dtype("U1").itemsize
    if len(value) > width:
        raise SevFormatError(f"{field} {value!r} is longer than {width} characters")


def build_catalog(dirname: str, filenames: list[str]) -> np.ndarray:
    """
    Create one `_chunk_file_dtype` row per file with what the file name
    and the file system tell: size, channel, chunk and event name.
    Header fields are filled later.
    """
    catalog = np.zeros(len(filenames), dtype=_chunk_file_dtype)
    for i, filename in enumerate(filenames):
        channel, chunk, event_name = parse_sev_filename(Path(filename).stem)
        size = os.path.getsize(os.path.join(dirname, filename))
        _check_length(catalog, "filename", filename)
        _check_length(catalog, "event_name", event_name)
        catalog["filename"][i] = filename
        catalog["size"][i] = size
        catalog["channel"][i] = channel
        catalog["chunk"][i] = chunk
        catalog["data_size"][i] = size - SEV_HEADER_SIZE
        catalog["event_name"][i] = event_name
    return catalog

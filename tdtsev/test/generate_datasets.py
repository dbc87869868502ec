'''
Generate SEV datasets for testing
'''

from pathlib import Path

import numpy as np

from tdtsev.rawio.sevheader import SEV_FORMATS, SevStreamHeader


def sev_filename(block, event_name, channel, chunk=0):
    name = f"{block}_{event_name}_ch{channel}"
    if chunk:
        name += f"-{chunk}h"
    return name + ".sev"


def write_sev_file(path, samples, event_name="eeg", channel=1, version=3, rate=2, decimate=1,
                   total_channels=1, file_type=b"SEV", file_size=None, sample_width=None,
                   format_code=None, headerless=False):
    """
    Write a SEV file: a 40 bytes header followed by `samples`.

    The default rate/decimate give fs = 2 ** (2 - 12) * 25e6 = 24414.0625 Hz.
    With `headerless=True` the header is left empty, as in files written
    by OpenEx before v2.18.
    """
    samples = np.asarray(samples)
    header = np.zeros(1, dtype=SevStreamHeader)
    if not headerless:
        header["file_size"] = header.itemsize + samples.nbytes if file_size is None else file_size
        header["file_type"] = file_type
        header["version"] = version
        header["event_name"] = event_name.encode("ascii")[:4]
        header["channel"] = channel
        header["total_channels"] = total_channels
        header["sample_width"] = samples.dtype.itemsize if sample_width is None else sample_width
        if format_code is None:
            format_code = SEV_FORMATS.index(samples.dtype.name)
        header["format_code"] = format_code
        header["decimate"] = decimate
        header["rate"] = rate
    with open(path, "wb") as f:
        f.write(header.tobytes())
        f.write(samples.tobytes())
    return Path(path)


def make_samples(channel, chunk, npts, dtype="float32"):
    """Samples that tell where they come from: channel * 100000 + position in the recording."""
    return (channel * 100000 + chunk * npts + np.arange(npts)).astype(dtype)


def generate_sev_recording(dirname, event_name="eeg", block="Block-1", channels=(1,), chunks=(0,),
                           npts=1000, dtype="float32", **header_kargs):
    """
    Write one file per channel and chunk in `dirname`.

    Returns
    -------
    written: dict
        {(channel, chunk): samples}
    """
    written = {}
    for channel in channels:
        for chunk in chunks:
            samples = make_samples(channel, chunk, npts, dtype)
            path = Path(dirname) / sev_filename(block, event_name, channel, chunk)
            write_sev_file(path, samples, event_name=event_name, channel=channel, **header_kargs)
            written[(channel, chunk)] = samples
    return written

"""
Class for reading data from TDT SEV files.

SEV files are generated by an RS4 Data Streamer, by enabling the Discrete
Files option in the Synapse Stream Data Storage gizmo, or by setting the
Unique Channel Files option of the Stream_Store_MC macros in OpenEx.

Each file holds one channel of one store (here: stream) for at most one hour,
behind a 40 bytes header. Files are grouped into streams by event name,
then read back hour after hour to rebuild continuous signals.

Terminology:
  * stream: all the files that share an event name
  * chunk: one file, i.e. one hour of one channel

Author: tdtsev contributors

"""

from __future__ import annotations

import os

import numpy as np

from .baserawio import BaseRawIO, _signal_channel_dtype, _signal_stream_dtype
from .sevcatalog import SEV_HEADER_SIZE, build_catalog, scan_sev_files
from .sevheader import SevHeader, sanitize_name
from .sevtimeranges import (
    has_uniform_chunk_sizes,
    resolve_sample_range,
    resolve_time_ranges,
    stream_chunk_sizes,
)


class SevRawIO(BaseRawIO):
    """
    Class for reading a directory of TDT SEV files (or a single SEV file).

    Parameters
    ----------
    dirname: str | Path, default: ''
        The directory holding the *.sev files. A path to one file restricts
        reading to that file.
    fs: float, default: 0.
        Sampling rate override. Useful for lower sampling rates that are not
        correctly written into the SEV header. 0 uses the header value.

    Examples
    --------
    >>> import tdtsev
    >>> reader = tdtsev.rawio.SevRawIO(dirname="Subject1-230101")
    >>> reader.parse_header()
    >>> print(reader)
    >>> raw_chunk = reader.get_analogsignal_chunk(i_start=0, i_stop=1024, stream_index=0)
    >>> buffers = reader.read_time_ranges(0, [(0.5, 2.5)])

    """

    extensions = ["sev"]
    rawmode = "one-dir"

    def __init__(self, dirname="", fs=0.0):
        BaseRawIO.__init__(self)
        self.dirname = str(dirname)
        self.fs = fs

    def _source_name(self):
        return self.dirname

    def _parse_header(self):
        dirname, filenames = scan_sev_files(self.dirname)
        self._files_dirname = dirname
        if len(filenames) == 0:
            self._warn(f"no sev files found in {self.dirname}")

        if self.fs > 0:
            self._warn(f"Assuming SEV sampling rate is {self.fs:.4f} Hz")

        catalog = build_catalog(dirname, filenames)
        for i, filename in enumerate(catalog["filename"]):
            header = SevHeader(os.path.join(dirname, filename))
            for message in header.warnings:
                self._warn(message)

            dtype = np.dtype(header["dtype"])
            catalog["version"][i] = header["version"]
            catalog["channel"][i] = header["channel"]
            catalog["dtype"][i] = header["dtype"]
            catalog["sample_width"][i] = dtype.itemsize
            catalog["decimate"][i] = header["decimate"]
            catalog["rate"][i] = header["rate"]
            catalog["sampling_rate"][i] = self.fs if self.fs > 0 else header["sampling_rate"]
            catalog["event_name"][i] = header["event_name"]
            catalog["npts"][i] = catalog["data_size"][i] // dtype.itemsize
            self.logger.debug(
                f"{filename}: version {header['version']} event {header['event_name']} "
                f"ch {header['channel']} {header['dtype']} {catalog['sampling_rate'][i]} Hz"
            )

        self._stream_files = []
        self._stream_var_names = []
        signal_streams = []
        signal_channels = []
        for event_name in np.unique(catalog["event_name"]):
            mask = catalog["event_name"] == event_name
            files = np.sort(catalog[mask], order=["channel", "chunk"])

            pairs = list(zip(files["channel"], files["chunk"]))
            if len(set(pairs)) != len(pairs):
                self._warn(f"{event_name} store has several files for the same channel and hour, store skipped")
                continue

            if np.unique(files["sampling_rate"]).size > 1 or np.unique(files["dtype"]).size > 1:
                self._warn(
                    f"{event_name} store files do not share the same sampling rate and format, "
                    f"using {files['sampling_rate'][0]} Hz {files['dtype'][0]}"
                )

            var_name = sanitize_name(event_name)
            if var_name != event_name:
                self._warn(f"{event_name} is not a valid variable name, changing to {var_name}")
            catalog["var_name"][mask] = var_name
            files["var_name"] = var_name

            stream_id = event_name
            signal_streams.append((event_name, stream_id))
            for channel in np.unique(files["channel"]):
                ch_name = f"{event_name} ch{channel}"
                signal_channels.append(
                    (ch_name, str(channel), files["sampling_rate"][0], files["dtype"][0], stream_id)
                )
            self._stream_files.append(files)
            self._stream_var_names.append(var_name)

        signal_streams = np.array(signal_streams, dtype=_signal_stream_dtype)
        signal_channels = np.array(signal_channels, dtype=_signal_channel_dtype)

        self.header = {}
        self.header["signal_streams"] = signal_streams
        self.header["signal_channels"] = signal_channels
        self.header["chunk_files"] = catalog

    def event_names(self):
        """All event names found in the files, sorted. Includes skipped stores."""
        return [str(name) for name in np.unique(self.header["chunk_files"]["event_name"])]

    def stream_index_from_name(self, event_name: str):
        names = list(self.header["signal_streams"]["name"])
        return names.index(event_name)

    def stream_var_name(self, stream_index: int):
        """Event name of the stream turned into a valid identifier."""
        return self._stream_var_names[stream_index]

    def stream_channels(self, stream_index: int):
        """Channel numbers of a stream, ascending."""
        return np.unique(self._stream_files[stream_index]["channel"])

    def _get_signal_size(self, stream_index):
        files = self._stream_files[stream_index]
        _, sizes = stream_chunk_sizes(files, self.stream_channels(stream_index))
        return int(np.sum(sizes))

    def _get_analogsignal_chunk(self, i_start, i_stop, stream_index, channel_indexes):
        files = self._stream_files[stream_index]
        channels = self.stream_channels(stream_index)
        if channel_indexes is not None:
            channels = np.atleast_1d(channels[channel_indexes])

        chunks, sizes = stream_chunk_sizes(files, channels)
        i_start = i_start or 0
        i_stop = i_stop if i_stop is not None else int(np.sum(sizes))
        resolved = resolve_sample_range(i_start, i_stop, sizes)
        return self._read_resolved_range(stream_index, channels, chunks, resolved).T

    def read_time_ranges(self, stream_index: int, time_ranges, channels=None, verbose: bool = False):
        """
        Read time windows of a stream.

        Parameters
        ----------
        stream_index: int
            The stream to read
        time_ranges: list[tuple[float, float]]
            (t1, t2) windows in seconds, t2 = inf reads to the end
        channels: list[int] | None, default: None
            Channel numbers to read, all channels of the stream if None
        verbose: bool, default: False
            Log every file read at INFO level instead of DEBUG

        Returns
        -------
        buffers: list[np.ndarray]
            One (n_channels, n_samples) array per time range, channels ascending
        """
        stream_index = self._get_stream_index_from_arg(stream_index)
        files = self._stream_files[stream_index]
        if channels is None:
            channels = self.stream_channels(stream_index)
        channels = np.sort(np.atleast_1d(channels))

        chunks, sizes = stream_chunk_sizes(files, channels)
        if not has_uniform_chunk_sizes(sizes):
            event_name = self.header["signal_streams"]["name"][stream_index]
            self._warn(f"{event_name} store hours do not all hold the same number of samples: {sizes.tolist()}")

        sampling_rate = self.get_signal_sampling_rate(stream_index)
        resolved_ranges = resolve_time_ranges(time_ranges, sampling_rate, sizes)
        return [
            self._read_resolved_range(stream_index, channels, chunks, resolved, verbose=verbose)
            for resolved in resolved_ranges
        ]

    def _read_resolved_range(self, stream_index, channels, chunks, resolved, verbose=False):
        files = self._stream_files[stream_index]
        event_name = self.header["signal_streams"]["name"][stream_index]
        dtype = np.dtype(files["dtype"][0])
        log = self.logger.info if verbose else self.logger.debug

        buffer = np.zeros((len(channels), resolved.sample_count), dtype=dtype)
        written = []
        for row, channel in enumerate(channels):
            channel_files = files[files["channel"] == channel]
            cursor = 0
            for position in range(resolved.start_chunk, resolved.end_chunk + 1):
                chunk = chunks[position]
                match = channel_files[channel_files["chunk"] == chunk]
                if match.size == 0:
                    raise FileNotFoundError(f"{event_name} store has no file for channel {channel} hour {chunk}")
                filename = match["filename"][0]

                first_sample = resolved.start_offset if position == resolved.start_chunk else 0
                if position == resolved.end_chunk:
                    read_size = resolved.end_offset - first_sample
                else:
                    read_size = -1  # up to the end of the file

                with open(os.path.join(self._files_dirname, filename), "rb") as fid:
                    fid.seek(SEV_HEADER_SIZE + first_sample * dtype.itemsize)
                    samples = np.fromfile(fid, dtype=dtype, count=read_size)

                samples = samples[: buffer.shape[1] - cursor]
                buffer[row, cursor : cursor + samples.size] = samples
                cursor += samples.size
                log(f"{filename}: ch {channel} hour {chunk}, {samples.size} samples from sample {first_sample}")
            written.append(cursor)

        if len(written) == 0:
            return buffer
        n_samples = min(written)
        if max(written) != n_samples:
            self._warn(
                f"{event_name} channels do not hold the same number of samples in this range, "
                f"keeping the first {n_samples}"
            )
        return buffer[:, :n_samples]

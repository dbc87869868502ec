"""
SevIO
======

Time window reading of SEV recordings on top of `SevRawIO`.

`SevRawIO` gives sample indexed access to each stream. `SevIO` adds the
read call of the TDT tools: windows in seconds, a channel and store filter,
and a result keyed by store name::

    >>> from tdtsev import read_sev
    >>> data = read_sev("Subject1-230101", t1=0.5, t2=2.5)
    >>> data["Wav1"].data.shape
    (16, 48828)
    >>> data["Wav1"].sampling_rate
    array(24414.0625) * Hz

"""

from __future__ import annotations

import math

import numpy as np
import quantities as pq

from tdtsev.rawio.sevcatalog import remote_source_path
from tdtsev.rawio.sevexceptions import SevConfigurationError
from tdtsev.rawio.sevrawio import SevRawIO

from .sevoptions import SevReadOptions


class SevSignal:
    """
    Decoded data of one store.

    Attributes
    ----------
    name: str
        the event name of the store
    fs: float
        sampling rate in Hz
    channels: list[int]
        channel numbers, one per row of the buffers
    data: np.ndarray | list[np.ndarray]
        (n_channels, n_samples) buffer, or one buffer per time range when
        several ranges were requested
    t_starts: list[float]
        time in seconds of the first sample of each buffer
    """

    def __init__(self, name, fs, channels, data, t_starts):
        self.name = name
        self.fs = fs
        self.channels = channels
        self.data = data
        self.t_starts = t_starts

    @property
    def sampling_rate(self):
        return pq.Quantity(self.fs, "Hz")

    def buffers(self):
        """The decoded buffers as a list, whatever the number of ranges."""
        if isinstance(self.data, list):
            return self.data
        return [self.data]

    def times(self, range_index=0):
        """Time of each sample of a buffer, in seconds."""
        buffer = self.buffers()[range_index]
        t_start = self.t_starts[range_index]
        return (t_start + np.arange(buffer.shape[1]) / self.fs) * pq.s

    def __repr__(self):
        shapes = [b.shape for b in self.buffers()]
        return f"SevSignal({self.name}, fs={self.fs} Hz, channels={self.channels}, shapes={shapes})"


class SevResult(dict):
    """
    Decoded stores keyed by their name turned into a valid identifier.

    `warnings` holds the messages of every SevWarning emitted while reading,
    `time_ranges` the explicit windows when some were requested.
    """

    def __init__(self, *args, warnings=None, time_ranges=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.warnings = [] if warnings is None else warnings
        self.time_ranges = time_ranges


class SevIO(SevRawIO):
    """
    Class for reading time windows out of TDT SEV files.

    Parameters
    ----------
    dirname: str | Path, default: ''
        directory of the *.sev files, or a single file
    fs: float, default: 0.
        sampling rate override
    device, tank, block: str, default: ''
        when given (all three) the files are read from
        ``\\\\DEVICE\\data\\TANK\\BLOCK\\`` instead of dirname
    """

    def __init__(self, dirname="", fs=0.0, device="", tank="", block=""):
        remote = remote_source_path(device, tank, block)
        if remote is None and not str(dirname):
            raise SevConfigurationError("a source path or device, tank and block must be given")
        SevRawIO.__init__(self, dirname=remote or dirname, fs=fs)

    def read(self, options: SevReadOptions | None = None, **kwargs):
        """
        Read the recording.

        Options can be given as a `SevReadOptions` or as keyword arguments.
        A non zero `fs` replaces the sampling rate the reader was built with
        and the header is parsed again. device, tank and block must point to
        the source the reader was built with.

        Returns
        -------
        result: SevResult | list[str]
            the decoded stores, or the sorted event names when just_names is set
        """
        if options is None:
            options = SevReadOptions.from_kwargs(**kwargs)
        elif kwargs:
            raise SevConfigurationError("give either a SevReadOptions or keyword arguments, not both")

        remote = remote_source_path(options.device, options.tank, options.block)
        if remote is not None and remote != self.dirname:
            raise SevConfigurationError(f"{remote} is not the source of this reader: {self.dirname}")

        if options.fs > 0 and options.fs != self.fs:
            self.fs = options.fs
            self.is_header_parsed = False

        if not self.is_header_parsed:
            self.parse_header()
        first_message = len(self.warning_messages)

        if options.just_names:
            return self.event_names()

        time_ranges = options.time_ranges()
        result = SevResult(time_ranges=list(options.ranges) if options.ranges else None)

        stream_names = list(self.header["signal_streams"]["name"])
        if options.event_name and options.event_name not in stream_names:
            self._warn(f"{options.event_name} store not found in {self.source_name()}")

        for stream_index, event_name in enumerate(stream_names):
            if options.event_name and options.event_name != event_name:
                continue

            channels = self.stream_channels(stream_index)
            if options.channel is not None:
                if options.channel not in channels:
                    self._warn(f"Channel {options.channel} not found in {event_name} store")
                    continue
                channels = np.array([options.channel])

            buffers = self.read_time_ranges(stream_index, time_ranges, channels=channels, verbose=options.verbose)

            fs = self.get_signal_sampling_rate(stream_index)
            t_starts = [max(math.ceil(t1 * fs), 0) / fs for t1, _ in time_ranges]
            key = self.stream_var_name(stream_index)
            if key in result:
                new_key = f"{key}_{stream_index}"
                self._warn(f"{event_name} store name collides with another store as {key}, stored as {new_key}")
                key = new_key
            result[key] = SevSignal(
                name=str(event_name),
                fs=fs,
                channels=[int(c) for c in channels],
                data=buffers[0] if len(buffers) == 1 else buffers,
                t_starts=t_starts,
            )

        result.warnings = self.header_warnings + self.warning_messages[first_message:]
        return result


def read_sev(source="", **options):
    """
    Read a SEV recording in one call.

    Parameters
    ----------
    source: str | Path
        directory of the *.sev files, or a single file. May be left empty
        when device, tank and block are given.
    **options:
        see `SevReadOptions`; unknown names raise SevConfigurationError

    Returns
    -------
    result: SevResult | list[str]
    """
    options = SevReadOptions.from_kwargs(**options)
    io = SevIO(
        dirname=source,
        fs=options.fs,
        device=options.device,
        tank=options.tank,
        block=options.block,
    )
    return io.read(options)

"""
baserawio
======

Classes
-------

BaseRawIO
abstract class which should be overridden to write a RawIO.

RawIO is the low level API of tdtsev that provides fast access to the raw data.
A RawIO should follow these guidelines:
  * fast reading of the header (do not read the complete files)
  * samples are read on demand, one file at a time

For this level, recordings are mapped as follows:

A channel refers to a physical channel of a recording. It is identified by a
channel_id. A stream is a set of channels which share the same sampling rate
and the same data type of samples. Each stream has a unique stream_id and a
name. The samples of a stream can thus be retrieved as a numpy array, a chunk
of samples.

Channels within a stream can be accessed either by their channel_id, which must
be unique within a stream, or by their channel_index, which is a 0 based index
to all channels within the stream.

With this API the IO has an attribute `header` with necessary keys.
This `header` attribute is done in the `_parse_header(...)` method.

Conditions that do not prevent reading (odd names, mismatching characteristics
inside a stream, ...) are reported with `SevWarning` and collected in
`warning_messages` so that callers can inspect them after the fact. The ones
met by `parse_header()` are kept apart in `header_warnings`.

"""

from __future__ import annotations

import logging
import warnings

import numpy as np

from tdtsev import logging_handler

from .sevexceptions import SevWarning


possible_raw_modes = [
    "one-file",
    "multi-file",
    "one-dir",
]

_signal_stream_dtype = [
    ("name", "U64"),  # not necessarily unique
    ("id", "U64"),  # must be unique
]

_signal_channel_dtype = [
    ("name", "U64"),  # not necessarily unique
    ("id", "U64"),  # must be unique inside a stream
    ("sampling_rate", "float64"),
    ("dtype", "U16"),
    ("stream_id", "U64"),
]

_common_sig_characteristics = ["sampling_rate", "dtype", "stream_id"]


class BaseRawIO:
    """
    Generic class to handle.

    """

    name = "BaseRawIO"
    description = ""
    extensions = []

    rawmode = None  # one key from possible_raw_modes

    def __init__(self, **kargs):
        """
        init docstring should be filled out at the rawio level so the user knows whether to
        input filename or dirname.

        """
        # create a logger for the IO class
        fullname = self.__class__.__module__ + "." + self.__class__.__name__
        self.logger = logging.getLogger(fullname)
        # Create a logger for 'tdtsev' and add a handler to it if it doesn't have one already.
        # (it will also not add one if the root logger has a handler)
        corename = self.__class__.__module__.split(".")[0]
        corelogger = logging.getLogger(corename)
        rootlogger = logging.getLogger()
        if not corelogger.handlers and not rootlogger.handlers:
            corelogger.addHandler(logging_handler)

        if self.rawmode is not None and self.rawmode not in possible_raw_modes:
            raise ValueError(f"rawmode must be one of {possible_raw_modes}, not {self.rawmode!r}")

        self.header = None
        self.is_header_parsed = False
        self.warning_messages = []
        self.header_warnings = []

    def parse_header(self):
        """
        Parses the header of the file(s) to allow for faster computations
        for all other functions
        """
        # this must create
        # self.header['signal_streams']
        # self.header['signal_channels']
        self.warning_messages = []
        self._parse_header()
        self._check_stream_signal_channel_characteristics()
        self.header_warnings = list(self.warning_messages)
        self.is_header_parsed = True

    def source_name(self):
        """Return fancy name of file source"""
        return self._source_name()

    def __repr__(self):
        txt = f"{self.__class__.__name__}: {self.source_name()}\n"
        if self.header is not None:
            v = [
                s["name"] + f" (chans: {self.signal_channels_count(i)})"
                for i, s in enumerate(self.header["signal_streams"])
            ]
            v = pprint_vector(v)
            txt += f"signal_streams: {v}\n"
            v = pprint_vector(self.header["signal_channels"]["name"])
            txt += f"signal_channels: {v}\n"

        return txt

    def _warn(self, message: str):
        """Report a non fatal condition and keep track of it."""
        self.warning_messages.append(message)
        warnings.warn(message, SevWarning, stacklevel=3)

    def signal_streams_count(self):
        """Return the number of signal streams."""
        return len(self.header["signal_streams"])

    def signal_channels_count(self, stream_index: int):
        """Returns the number of signal channels for a given stream.

        Parameters
        ----------
        stream_index: int
            the stream index in which to count the signal channels

        Returns
        -------
        count: int
            the number of signal channels of a given stream
        """
        stream_id = self.header["signal_streams"][stream_index]["id"]
        channels = self.header["signal_channels"]
        channels = channels[channels["stream_id"] == stream_id]
        return len(channels)

    ###
    # signal and channel zone

    def _check_stream_signal_channel_characteristics(self):
        """
        Check that all channels belonging to the same stream_id share
        _common_sig_characteristics. These presently include:
          * sampling_rate
          * dtype

        A divergence is reported as a warning, the first channel wins.
        Channel ids that are not unique inside a stream are an error.
        """
        signal_streams = self.header["signal_streams"]
        signal_channels = self.header["signal_channels"]
        if signal_streams.size > 0:
            if signal_channels.size < 1:
                raise ValueError("Signal stream exists but there are no signal channels")

        for stream_index in range(signal_streams.size):
            stream_id = signal_streams[stream_index]["id"]
            mask = signal_channels["stream_id"] == stream_id
            characteristics = signal_channels[mask][_common_sig_characteristics]
            unique_characteristics = np.unique(characteristics)
            if unique_characteristics.size != 1:
                self._warn(
                    f"Some channels in stream_id {stream_id} "
                    f"do not have the same {_common_sig_characteristics} {unique_characteristics}"
                )

            channel_ids = signal_channels[mask]["id"]
            if np.unique(channel_ids).size != channel_ids.size:
                raise ValueError(f"signal_channels do not have unique ids for stream {stream_index}")

    def channel_id_to_index(self, stream_index: int, channel_ids: list[str]):
        """
        Inside a stream, transform channel_ids to channel_indexes.
        Based on self.header['signal_channels']
        channel_indexes are zero-based offsets within the stream

        Parameters
        ----------
        stream_index: int
            the stream index in which to convert the channel_ids to channel_indexes
        channel_ids: list[str]
            the list of channel_ids to convert to channel_indexes

        Returns
        -------
        channel_indexes: np.array[int]
             the channel_indexes associated with the given channel_ids
        """
        stream_id = self.header["signal_streams"][stream_index]["id"]
        mask = self.header["signal_channels"]["stream_id"] == stream_id
        signal_channels = self.header["signal_channels"][mask]
        chan_ids = list(signal_channels["id"])
        channel_indexes = np.array([chan_ids.index(str(chan_id)) for chan_id in channel_ids])
        return channel_indexes

    def _get_stream_index_from_arg(self, stream_index_arg: int | None):
        """
        Verifies the desired stream_index exists

        Parameters
        ----------
        stream_index_arg: int | None, default: None
            The stream_index to verify
            If None checks if only one stream exists and then returns 0 if it is single stream

        Returns
        -------
        stream_index: int
            The stream_index to be used for function requiring a stream_index

        """
        if stream_index_arg is None:
            if self.header["signal_streams"].size != 1:
                raise ValueError("stream_index must be given for files with multiple streams")
            stream_index = 0
        else:
            if stream_index_arg < 0 or stream_index_arg >= self.header["signal_streams"].size:
                raise ValueError(f"stream_index must be between 0 and {self.header['signal_streams'].size}")
            stream_index = stream_index_arg
        return stream_index

    def get_signal_size(self, stream_index: int | None = None):
        """
        Retrieves the number of samples of the channels in a stream.

        Parameters
        ----------
        stream_index: int | None, default: None
            The optional stream index in which to determine signal size
            This is required for data with multiple streams

        Returns
        -------
        signal_size: int
            The number of samples of the desired stream

        """
        stream_index = self._get_stream_index_from_arg(stream_index)
        return self._get_signal_size(stream_index)

    def get_signal_sampling_rate(self, stream_index: int | None = None):
        """
        Retrieves the sampling rate for a stream and all channels within that stream.

        Parameters
        ----------
        stream_index: int | None, default: None
            The desired stream index in which to get the sampling_rate
            This is required for data with multiple streams

        Returns
        -------
        sr: float
            The sampling rate of a given stream and all channels in that stream

        """
        stream_index = self._get_stream_index_from_arg(stream_index)
        stream_id = self.header["signal_streams"][stream_index]["id"]
        mask = self.header["signal_channels"]["stream_id"] == stream_id
        signal_channels = self.header["signal_channels"][mask]
        sr = signal_channels[0]["sampling_rate"]
        return float(sr)

    def get_analogsignal_chunk(
        self,
        i_start: int | None = None,
        i_stop: int | None = None,
        stream_index: int | None = None,
        channel_indexes: list[int] | None = None,
        channel_ids: list[str] | None = None,
    ):
        """
        Returns a chunk of raw signal as a Numpy array.

        Parameters
        ----------
        i_start: int | None, default: None
            The index of the first sample (not time) of the desired analog signal
        i_stop: int | None, default: None
            The index of one past the last sample (not time) of the desired analog signal
        stream_index: int | None, default: None
            The index of the stream containing the channels to assess for the analog signal
            This is required for data with multiple streams
        channel_indexes: list[int] | np.array[int] | None, default: None
            The list of indexes of channels to retrieve
        channel_ids: list[str] | None, default: None
            The list of channel_ids to retrieve

        Returns
        -------
        raw_chunk: np.array (n_samples, n_channels)
            The array with the raw signal samples

        Notes
        -----
        Rows are the samples and columns are the channels
        The channels are chosen by channel_ids, if provided, otherwise by
        channel_indexes, if provided, otherwise all channels are selected.

        Examples
        --------
        >>> rawio_reader.parse_header()
        >>> raw_sigs = rawio_reader.get_analogsignal_chunk(i_start=0, i_stop=1000, stream_index=0)
        >>> raw_sigs.shape
        (1000, 4) # 1000 samples by 4 channels

        """
        signal_streams = self.header["signal_streams"]
        signal_channels = self.header["signal_channels"]
        if signal_streams.size == 0 or signal_channels.size == 0:
            error_message = (
                "get_analogsignal_chunk can't be called on a file with no signal streams or channels."
                "Double check that your file contains signal streams and channels."
            )
            raise AttributeError(error_message)

        stream_index = self._get_stream_index_from_arg(stream_index)
        if channel_indexes is None and channel_ids is not None:
            channel_indexes = self.channel_id_to_index(stream_index, channel_ids)

        if isinstance(channel_indexes, list):
            channel_indexes = np.asarray(channel_indexes)

        if isinstance(channel_indexes, np.ndarray) and channel_indexes.dtype == "bool":
            if self.signal_channels_count(stream_index) != channel_indexes.size:
                raise ValueError(
                    "If channel_indexes is a boolean it must have be the same length as the "
                    f"number of channels {self.signal_channels_count(stream_index)}"
                )
            (channel_indexes,) = np.nonzero(channel_indexes)

        raw_chunk = self._get_analogsignal_chunk(i_start, i_stop, stream_index, channel_indexes)

        return raw_chunk

    ##################

    # Functions to be implemented in IO below here

    def _parse_header(self):
        raise (NotImplementedError)

    def _source_name(self):
        raise (NotImplementedError)

    def _get_signal_size(self, stream_index: int):
        """
        Return the size of the channels of a stream.
        """
        raise (NotImplementedError)

    def _get_analogsignal_chunk(
        self,
        i_start: int | None,
        i_stop: int | None,
        stream_index: int,
        channel_indexes: list[int] | None,
    ):
        """
        Return the samples from a set of signals indexed
        by stream_index and channel_indexes (local index inner stream).

        RETURNS
        -------
            array of samples, with each requested channel in a column
        """
        raise (NotImplementedError)


def pprint_vector(vector, lim: int = 8):
    vector = np.asarray(vector)
    if vector.ndim != 1:
        raise ValueError(f"`vector` must have a dimension of 1 and not {vector.ndim}")
    if len(vector) > lim:
        part1 = ", ".join(e for e in vector[: lim // 2])
        part2 = " , ".join(e for e in vector[-lim // 2 :])
        txt = f"[{part1} ... {part2}]"
    else:
        part1 = ", ".join(e for e in vector)
        txt = f"[{part1}]"
    return txt

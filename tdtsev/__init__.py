"""
tdtsev is a package for reading TDT SEV streaming recordings in Python:
files split by channel and by hour are stitched back into continuous
multi-channel numpy buffers.
"""

from tdtsev.version import version as __version__

import logging

logging_handler = logging.StreamHandler()

from tdtsev.rawio import SevRawIO
from tdtsev.io import SevIO, read_sev

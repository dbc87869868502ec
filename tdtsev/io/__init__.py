"""
:mod:`tdtsev.io` provides the time window reading of SEV recordings.

Classes:

* :attr:`SevIO`
* :attr:`SevReadOptions`

Functions:

.. autofunction:: tdtsev.io.read_sev

"""

from tdtsev.io.sevoptions import SevReadOptions
from tdtsev.io.sevio import SevIO, SevResult, SevSignal, read_sev

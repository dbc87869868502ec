"""
:mod:`tdtsev.rawio` provides classes for reading
SEV streaming recordings with a low-level API

:attr:`tdtsev.rawio.rawiolist` provides a list of rawio classes.

Functions:

.. autofunction:: tdtsev.rawio.get_rawio


Classes:

* :attr:`SevRawIO`


.. autoclass:: tdtsev.rawio.SevRawIO

    .. autoattribute:: extensions

"""

from pathlib import Path

from tdtsev.rawio.sevrawio import SevRawIO

rawiolist = [
    SevRawIO,
]


def get_rawio(filename_or_dirname):
    """
    Return a tdtsev.rawio class guess from file extension.

    Parameters
    ----------
    filename_or_dirname : str | Path
        The filename or directory name to check for file suffixes that
        can be read by tdtsev.

    Returns
    -------
    rawio: RawIO class | None
        The RawIO that can read the file/set of files or None.
    """
    filename_or_dirname = Path(filename_or_dirname)

    if not filename_or_dirname.exists() or filename_or_dirname.is_file():
        ext_list = [filename_or_dirname.suffix[1:]]
    else:
        ext_list = list({filename.suffix[1:] for filename in filename_or_dirname.glob("*") if filename.is_file()})

    for ext in ext_list:
        for rawio in rawiolist:
            if any(ext.lower() == ext2.lower() for ext2 in rawio.extensions):
                return rawio
    return None

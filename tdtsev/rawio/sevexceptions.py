"""
Errors and warnings raised while reading SEV recordings.

Failures to open or read a file are not wrapped: the builtin OSError
(FileNotFoundError, PermissionError, ...) propagates to the caller.
"""


class SevConfigurationError(ValueError):
    """Invalid read option or incomplete device/tank/block triple."""


class SevFormatError(ValueError):
    """A SEV file header that can not be interpreted."""


class SevWarning(UserWarning):
    """Non fatal condition met while reading: the call goes on."""

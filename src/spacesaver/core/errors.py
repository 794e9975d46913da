"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exception hierarchy. Everything the CLI treats as a clean, user-facing failure
derives from SpaceSaverError (size parsing errors derive from ValueError instead,
see utils/size_spec.py).
"""
from spacesaver.utils.size_spec import (
    SizeSpecError, InvalidUnitError, InvalidNumberError, SizeOverflowError, MalformedSizeError)


class SpaceSaverError(Exception):
    """Base class for fatal, user-reportable errors."""


class InvalidArgumentsError(SpaceSaverError):
    pass


class WalkError(SpaceSaverError):
    """Traversal of the root or one of its subtrees failed. The scan is aborted."""

    def __init__(self, message: str, path: str = None):
        super().__init__(message)
        self.path = path


class FingerprintError(SpaceSaverError):
    """A candidate file could not be opened or read while hashing."""

    def __init__(self, path: str, cause: OSError):
        super().__init__(f"Failed to read {path}: {cause}")
        self.path = path
        self.cause = cause


class CloneError(SpaceSaverError):
    pass


class CloneUnsupportedError(CloneError):
    """The platform or filesystem cannot clone this pair. Non-fatal."""


class CloneCrossDeviceError(CloneUnsupportedError):
    """Source and destination live on different filesystems. Non-fatal."""


class IdentityMismatchError(SpaceSaverError):
    pass


__all__ = [
    "SpaceSaverError",
    "InvalidArgumentsError",
    "SizeSpecError",
    "InvalidUnitError",
    "InvalidNumberError",
    "SizeOverflowError",
    "MalformedSizeError",
    "WalkError",
    "FingerprintError",
    "CloneError",
    "CloneUnsupportedError",
    "CloneCrossDeviceError",
    "IdentityMismatchError",
]

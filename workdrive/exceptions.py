# exceptions.py
from typing import Optional


class StorageError(Exception):
    """Base class for errors reported by the remote storage."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class UnableToReadFile(StorageError):
    """A file or its metadata could not be read."""
    pass


class UnableToWriteFile(StorageError):
    """An upload was rejected, either locally (size limit) or by the service."""
    pass


class UnableToDeleteFile(UnableToReadFile):
    pass


class UnableToMoveFile(UnableToReadFile):
    pass


class UnableToCopyFile(UnableToReadFile):
    pass


class UnableToCreateDirectory(UnableToReadFile):
    pass


class UnableToSetVisibility(UnableToReadFile):
    pass

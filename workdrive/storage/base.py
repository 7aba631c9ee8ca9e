# storage/base.py
from abc import ABC, abstractmethod
from typing import BinaryIO, Iterable, Iterator, Optional, Union

from .dto import DirectoryAttributes, FileAttributes, Visibility, WriteOptions

StorageAttributes = Union[FileAttributes, DirectoryAttributes]


class FilesystemAdapter(ABC):
    """
    Abstract base class for a filesystem adapter.
    Defines the common interface that a remote storage backend
    (e.g., WorkDrive) must implement to be used as a filesystem.
    """

    @abstractmethod
    def file_exists(self, path: str) -> bool:
        """
        Checks whether a file exists. Never raises.

        :param path: The path or ID of the file.
        """
        pass

    @abstractmethod
    def directory_exists(self, path: str) -> bool:
        """
        Checks whether a directory exists. Never raises.

        :param path: The path or ID of the directory.
        """
        pass

    @abstractmethod
    def write(
        self, path: str, contents: Union[bytes, str], options: Optional[WriteOptions] = None
    ) -> None:
        """
        Writes contents to a new file.

        :param path: Where to write; see the adapter for how paths are interpreted.
        :param contents: The file contents.
        :param options: Write options (filename override, overwrite flag).
        """
        pass

    @abstractmethod
    def write_stream(
        self,
        path: str,
        contents: Union[BinaryIO, Iterable[bytes]],
        options: Optional[WriteOptions] = None,
    ) -> None:
        """
        Writes the contents of a stream to a new file.

        :param path: Where to write.
        :param contents: A binary file-like object or an iterable of byte chunks.
        :param options: Write options.
        """
        pass

    @abstractmethod
    def read(self, path: str) -> bytes:
        """Returns the full contents of a file."""
        pass

    @abstractmethod
    def read_stream(self, path: str) -> BinaryIO:
        """Returns the contents of a file as a binary stream."""
        pass

    @abstractmethod
    def delete(self, path: str) -> None:
        pass

    @abstractmethod
    def delete_directory(self, path: str) -> None:
        pass

    @abstractmethod
    def create_directory(self, path: str, options: Optional[WriteOptions] = None) -> None:
        pass

    @abstractmethod
    def set_visibility(self, path: str, visibility: Visibility) -> None:
        pass

    @abstractmethod
    def visibility(self, path: str) -> FileAttributes:
        pass

    @abstractmethod
    def mime_type(self, path: str) -> FileAttributes:
        pass

    @abstractmethod
    def last_modified(self, path: str) -> FileAttributes:
        pass

    @abstractmethod
    def file_size(self, path: str) -> FileAttributes:
        pass

    @abstractmethod
    def list_contents(self, path: str, deep: bool) -> Iterator[StorageAttributes]:
        """
        Lists the entries of a directory.

        :param path: The path or ID of the directory.
        :param deep: Whether to descend into subdirectories.
        :return: An iterator of FileAttributes / DirectoryAttributes.
        """
        pass

    @abstractmethod
    def move(self, source: str, destination: str, options: Optional[WriteOptions] = None) -> None:
        pass

    @abstractmethod
    def copy(self, source: str, destination: str, options: Optional[WriteOptions] = None) -> None:
        pass

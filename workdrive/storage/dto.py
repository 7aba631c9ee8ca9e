# workdrive/storage/dto.py
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class Visibility(str, Enum):
    """Sharing state of a resource. PUBLIC maps to WorkDrive's "published" state."""

    PUBLIC = "public"
    PRIVATE = "private"

    @classmethod
    def from_published(cls, is_published: bool) -> "Visibility":
        return cls.PUBLIC if is_published else cls.PRIVATE


class FileAttributes(BaseModel):
    """
    Metadata of a single file, as reported by the remote service.
    Every field except `path` is optional, since the single-attribute
    operations (file_size, mime_type, ...) only fill in what was asked for.
    """

    path: str
    file_size: Optional[int] = None
    visibility: Optional[Visibility] = None
    last_modified: Optional[int] = None  # milliseconds since epoch
    mime_type: Optional[str] = None
    extra_metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def is_file(self) -> bool:
        return True

    @property
    def is_dir(self) -> bool:
        return False


class DirectoryAttributes(BaseModel):
    """Metadata of a folder."""

    path: str
    visibility: Optional[Visibility] = None
    last_modified: Optional[int] = None
    extra_metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def is_file(self) -> bool:
        return False

    @property
    def is_dir(self) -> bool:
        return True


class WriteOptions(BaseModel):
    """
    Options accepted by write, write_stream and create_directory.

    filename: name to store the upload under, overriding the one taken from the path.
    override_name_exist: replace a same-named file in the parent folder.
    """

    filename: Optional[str] = None
    override_name_exist: Optional[bool] = None

# adapter.py
import io
import logging
import mimetypes
import uuid
from enum import Enum
from typing import Any, BinaryIO, Callable, Dict, Iterable, Iterator, List, Optional, Tuple, Type, Union

import requests
from requests.models import Response

from .auth import TokenProvider
from .exceptions import (
    StorageError,
    UnableToCopyFile,
    UnableToCreateDirectory,
    UnableToDeleteFile,
    UnableToMoveFile,
    UnableToReadFile,
    UnableToSetVisibility,
    UnableToWriteFile,
)
from .storage.base import FilesystemAdapter, StorageAttributes
from .storage.dto import DirectoryAttributes, FileAttributes, Visibility, WriteOptions

DEFAULT_BASE_URL = "https://www.zohoapis.com/workdrive"
DEFAULT_DOWNLOAD_BASE_URL = "https://download.zoho.com"
JSON_API_MEDIA_TYPE = "application/vnd.api+json"

MAX_FILE_SIZE = 250 * 1024 * 1024  # 250 MiB, the WorkDrive upload limit
TRASH_STATUS = "51"
VIEWER_ROLE_ID = 34
PUBLISH_SHARED_TYPE = "publish"


class HttpMethod(str, Enum):
    GET = "get"
    POST = "post"
    PATCH = "patch"
    DELETE = "delete"


def detect_mime_type(filename: str) -> Optional[str]:
    """Guesses a MIME type from the file extension. Returns None when unknown."""
    mime_type, _ = mimetypes.guess_type(filename)
    return mime_type


def split_path(path: str) -> Tuple[str, str]:
    """
    Splits a path into (name, parent_id).

    "parent_id/name" yields the last segment as the name and everything before it
    as the parent ID. A bare ID is taken as the parent and gets a generated,
    unique placeholder name.
    """
    if "/" in path:
        parent_id, name = path.rsplit("/", 1)
        return name or uuid.uuid4().hex, parent_id
    return uuid.uuid4().hex, path


def get_error_message(response: Response) -> str:
    """
    Derives a readable message from an error response:
    "File already exists" for 409, "<id>: <title>" from a JSON:API error
    envelope, "Unknown error" otherwise.
    """
    if response.status_code == 409:
        return "File already exists"
    try:
        body = response.json()
    except ValueError:
        body = None

    errors = body.get("errors") if isinstance(body, dict) else None
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        error_id = errors[0].get("id")
        title = errors[0].get("title")
        if error_id is not None and title is not None:
            return f"{error_id}: {title}"
    return "Unknown error"


def _read_all(contents: Union[BinaryIO, Iterable[bytes], bytes, str]) -> bytes:
    """Buffers a stream (file-like object or iterable of chunks) into bytes."""
    if isinstance(contents, str):
        return contents.encode("utf-8")
    if isinstance(contents, (bytes, bytearray)):
        return bytes(contents)
    if hasattr(contents, "read"):
        data = contents.read()
        return data.encode("utf-8") if isinstance(data, str) else data
    return b"".join(
        chunk.encode("utf-8") if isinstance(chunk, str) else chunk for chunk in contents
    )


class WorkDriveAdapter(FilesystemAdapter):
    """
    Filesystem adapter backed by the Zoho WorkDrive REST API.

    Paths are WorkDrive resource IDs. Only write and create_directory look at
    "parent_id/name" syntax, to know where the new resource goes and how to name it.
    """

    def __init__(
        self,
        token_provider: TokenProvider,
        base_url: Optional[str] = None,
        download_base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        mime_detector: Optional[Callable[[str], Optional[str]]] = None,
    ):
        self.token_provider = token_provider
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.download_base_url = (download_base_url or DEFAULT_DOWNLOAD_BASE_URL).rstrip("/")
        self.timeout = timeout
        self.mime_detector = mime_detector or detect_mime_type

        self.session = requests.Session()
        self._dispatch: Dict[HttpMethod, Callable[..., Response]] = {
            HttpMethod.GET: self.session.get,
            HttpMethod.POST: self.session.post,
            HttpMethod.PATCH: self.session.patch,
            HttpMethod.DELETE: self.session.delete,
        }
        logging.info(f"WorkDrive adapter initialized for {self.base_url}.")

    # --- HTTP plumbing ---

    def _headers(self) -> Dict[str, str]:
        # A fresh token for every request; refresh is the provider's business.
        access_token = self.token_provider.generate_access_token()
        return {
            "Authorization": f"Bearer {access_token}",
            "Accept": JSON_API_MEDIA_TYPE,
        }

    def _request(
        self,
        method: HttpMethod,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
        base_url: Optional[str] = None,
    ) -> Response:
        url = (base_url or self.base_url) + path
        kwargs: Dict[str, Any] = {"headers": self._headers(), "timeout": self.timeout}
        if payload is not None:
            kwargs["json"] = payload
        logging.debug(f"{method.name} {url}")
        return self._dispatch[method](url, **kwargs)

    def _multipart_request(
        self, path: str, content: bytes, fields: Dict[str, str]
    ) -> Response:
        url = self.base_url + path
        files = {"content": (fields["filename"], content)}
        logging.debug(f"POST (multipart) {url}")
        return self._dispatch[HttpMethod.POST](
            url,
            headers=self._headers(),
            data=fields,
            files=files,
            timeout=self.timeout,
        )

    @staticmethod
    def _fail(error_class: Type[StorageError], response: Response, action: str):
        message = get_error_message(response)
        logging.error(f"Failed to {action} (HTTP {response.status_code}): {message}")
        raise error_class(message, response.status_code)

    @staticmethod
    def _resource_body(attributes: Dict[str, Any], resource_type: str = "files") -> Dict[str, Any]:
        return {"data": {"attributes": attributes, "type": resource_type}}

    # --- metadata ---

    def _request_file_info(self, resource_id: str) -> Response:
        return self._request(HttpMethod.GET, f"/api/v1/files/{resource_id}")

    def _get_file_attributes(self, resource_id: str) -> Dict[str, Any]:
        response = self._request_file_info(resource_id)
        if response.status_code != 200:
            self._fail(UnableToReadFile, response, f"read metadata of '{resource_id}'")
        return response.json()["data"]["attributes"]

    def _detect_mime_type(self, attributes: Dict[str, Any]) -> Optional[str]:
        mime_type = None
        if attributes.get("name"):
            mime_type = self.mime_detector(attributes["name"])
        return mime_type if mime_type is not None else attributes.get("type")

    @staticmethod
    def _size_of(attributes: Dict[str, Any]) -> Optional[int]:
        return (attributes.get("storage_info") or {}).get("size_in_bytes")

    def file_exists(self, path: str) -> bool:
        try:
            response = self._request_file_info(path)
        except requests.RequestException as e:
            logging.warning(f"Could not check whether '{path}' exists: {e}")
            return False
        return response.status_code == 200

    def directory_exists(self, path: str) -> bool:
        # WorkDrive does not distinguish file and folder lookups.
        return self.file_exists(path)

    def visibility(self, path: str) -> FileAttributes:
        attributes = self._get_file_attributes(path)
        return FileAttributes(
            path=path,
            visibility=Visibility.from_published(bool(attributes.get("is_published"))),
        )

    def mime_type(self, path: str) -> FileAttributes:
        attributes = self._get_file_attributes(path)
        return FileAttributes(path=path, mime_type=self._detect_mime_type(attributes))

    def last_modified(self, path: str) -> FileAttributes:
        attributes = self._get_file_attributes(path)
        return FileAttributes(
            path=path, last_modified=attributes.get("modified_time_in_millisecond")
        )

    def file_size(self, path: str) -> FileAttributes:
        attributes = self._get_file_attributes(path)
        return FileAttributes(path=path, file_size=self._size_of(attributes))

    # --- writing ---

    def write(
        self, path: str, contents: Union[bytes, str], options: Optional[WriteOptions] = None
    ) -> None:
        self._write_data(path, _read_all(contents), options)

    def write_stream(
        self,
        path: str,
        contents: Union[BinaryIO, Iterable[bytes]],
        options: Optional[WriteOptions] = None,
    ) -> None:
        self._write_data(path, _read_all(contents), options)

    def _write_data(self, path: str, contents: bytes, options: Optional[WriteOptions]) -> None:
        options = options or WriteOptions()
        filename, parent_id = split_path(path)
        if len(contents) > MAX_FILE_SIZE:
            logging.error(
                f"Refusing to upload {len(contents)} bytes to '{parent_id}': limit is {MAX_FILE_SIZE} bytes."
            )
            raise UnableToWriteFile("File size is greater than 250MB")

        fields = {
            "parent_id": parent_id,
            "filename": options.filename if options.filename is not None else filename,
        }
        if options.override_name_exist is not None:
            fields["override-name-exist"] = "true" if options.override_name_exist else "false"

        logging.info(
            f"Uploading {len(contents)} bytes as '{fields['filename']}' to folder '{parent_id}'..."
        )
        response = self._multipart_request("/api/v1/upload", contents, fields)
        if response.status_code != 200:
            self._fail(UnableToWriteFile, response, f"upload '{fields['filename']}' to '{parent_id}'")
        logging.info(f"Uploaded '{fields['filename']}' to folder '{parent_id}'.")

    def create_directory(self, path: str, options: Optional[WriteOptions] = None) -> None:
        directory_name, parent_id = split_path(path)
        logging.info(f"Creating folder '{directory_name}' in '{parent_id}'...")
        response = self._request(
            HttpMethod.POST,
            "/api/v1/files",
            self._resource_body({"name": directory_name, "parent_id": parent_id}),
        )
        if response.status_code != 201:
            self._fail(UnableToCreateDirectory, response, f"create folder '{directory_name}'")

    # --- reading ---

    def read(self, path: str) -> bytes:
        logging.info(f"Downloading '{path}'...")
        response = self._request(
            HttpMethod.GET, f"/v1/workdrive/download/{path}", base_url=self.download_base_url
        )
        if response.status_code != 200:
            self._fail(UnableToReadFile, response, f"download '{path}'")
        return response.content

    def read_stream(self, path: str) -> BinaryIO:
        return io.BytesIO(self.read(path))

    def list_contents(self, path: str, deep: bool = False) -> Iterator[StorageAttributes]:
        """
        Lists the direct children of a folder.

        The children are fetched once, when this is called; the returned
        generator walks that single batch. `deep` is accepted for interface
        compatibility, subfolders are never descended into.
        """
        if deep:
            logging.debug(f"Recursive listing is not supported; listing direct children of '{path}'.")
        logging.info(f"Listing contents of folder '{path}'...")
        response = self._request(HttpMethod.GET, f"/api/v1/files/{path}/files")
        if response.status_code != 200:
            self._fail(UnableToReadFile, response, f"list contents of '{path}'")
        entries: List[Dict[str, Any]] = response.json()["data"]
        return (self._to_attributes(entry) for entry in entries)

    def _to_attributes(self, entry: Dict[str, Any]) -> StorageAttributes:
        attributes = entry["attributes"]
        visibility = Visibility.from_published(bool(attributes.get("is_published")))
        last_modified = attributes.get("modified_time_in_millisecond")
        if attributes.get("is_folder"):
            return DirectoryAttributes(
                path=entry["id"],
                visibility=visibility,
                last_modified=last_modified,
                extra_metadata=attributes,
            )
        return FileAttributes(
            path=entry["id"],
            file_size=self._size_of(attributes),
            visibility=visibility,
            last_modified=last_modified,
            mime_type=self._detect_mime_type(attributes),
            extra_metadata=attributes,
        )

    # --- mutations ---

    def delete(self, path: str) -> None:
        """Moves a file or folder to the trash."""
        logging.info(f"Trashing '{path}'...")
        response = self._request(
            HttpMethod.PATCH, f"/api/v1/files/{path}", self._resource_body({"status": TRASH_STATUS})
        )
        if response.status_code != 200:
            self._fail(UnableToDeleteFile, response, f"trash '{path}'")

    def delete_directory(self, path: str) -> None:
        self.delete(path)

    def move(self, source: str, destination: str, options: Optional[WriteOptions] = None) -> None:
        logging.info(f"Moving '{source}' to folder '{destination}'...")
        response = self._request(
            HttpMethod.PATCH,
            f"/api/v1/files/{source}",
            self._resource_body({"parent_id": destination}),
        )
        if response.status_code != 200:
            self._fail(UnableToMoveFile, response, f"move '{source}' to '{destination}'")

    def copy(self, source: str, destination: str, options: Optional[WriteOptions] = None) -> None:
        logging.info(f"Copying '{source}' to folder '{destination}'...")
        response = self._request(
            HttpMethod.POST,
            f"/api/v1/files/{destination}/copy",
            self._resource_body({"resource_id": source}),
        )
        if response.status_code != 201:
            self._fail(UnableToCopyFile, response, f"copy '{source}' to '{destination}'")

    def set_visibility(self, path: str, visibility: Visibility) -> None:
        """
        PRIVATE revokes every share permission on the resource, one DELETE per
        permission. Revocations already done stay done if a later one fails.
        PUBLIC publishes the resource with view-only access.
        """
        visibility = Visibility(visibility)
        if visibility is Visibility.PRIVATE:
            logging.info(f"Revoking all permissions on '{path}'...")
            response = self._request(HttpMethod.GET, f"/api/v1/files/{path}/permissions")
            if response.status_code != 200:
                self._fail(UnableToSetVisibility, response, f"list permissions of '{path}'")
            for permission in response.json()["data"]:
                response = self._request(HttpMethod.DELETE, f"/api/v1/permissions/{permission['id']}")
                if response.status_code not in (200, 204):
                    self._fail(
                        UnableToSetVisibility, response, f"revoke permission '{permission['id']}'"
                    )
        else:
            logging.info(f"Publishing '{path}'...")
            response = self._request(
                HttpMethod.POST,
                "/api/v1/permissions",
                self._resource_body(
                    {
                        "resource_id": path,
                        "shared_type": PUBLISH_SHARED_TYPE,
                        "role_id": VIEWER_ROLE_ID,
                    },
                    resource_type="permissions",
                ),
            )
            if response.status_code != 201:
                self._fail(UnableToSetVisibility, response, f"publish '{path}'")

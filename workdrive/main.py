# main.py
import logging
from typing import Optional

from .adapter import WorkDriveAdapter
from .auth import StaticTokenProvider
from .config import Settings, get_settings
from .exceptions import StorageError


def setup_logging():
    """Configures logging to file and console explicitly."""
    settings = get_settings()
    log_level_name = settings.LOG_LEVEL.upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level_name)

    # Clear any existing handlers to prevent duplicate logs on re-runs or implicit configs
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    try:
        file_handler = logging.FileHandler(settings.LOG_FILE)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    except IOError as e:
        root_logger.error(f"Failed to set up file logging to {settings.LOG_FILE}: {e}")

    # Reducing "noise" from third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)


def initialize_adapter(settings: Settings) -> Optional[WorkDriveAdapter]:
    """
    Builds a WorkDriveAdapter from settings.
    Returns None if no access token is configured.
    """
    if not settings.WORKDRIVE_ACCESS_TOKEN:
        logging.error("WORKDRIVE_ACCESS_TOKEN is not set. Cannot connect to WorkDrive.")
        return None

    return WorkDriveAdapter(
        token_provider=StaticTokenProvider(settings.WORKDRIVE_ACCESS_TOKEN),
        base_url=settings.WORKDRIVE_BASE_URL,
        download_base_url=settings.WORKDRIVE_DOWNLOAD_BASE_URL,
        timeout=settings.WORKDRIVE_REQUEST_TIMEOUT,
    )


def main() -> int:
    """Checks the connection by listing the configured root folder."""
    setup_logging()
    settings = get_settings()

    adapter = initialize_adapter(settings)
    if adapter is None:
        return 1

    folder_id = settings.WORKDRIVE_ROOT_FOLDER_ID
    if not folder_id:
        logging.error("WORKDRIVE_ROOT_FOLDER_ID is not set. Nothing to list.")
        return 1

    if not adapter.directory_exists(folder_id):
        logging.error(f"Folder '{folder_id}' not found or not accessible.")
        return 1

    try:
        for entry in adapter.list_contents(folder_id, deep=False):
            kind = "dir " if entry.is_dir else "file"
            logging.info(f"{kind} {entry.path} {entry.extra_metadata.get('name', '')}")
    except StorageError as e:
        logging.error(f"Listing folder '{folder_id}' failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Download (retrieve) and upload (store) operations against the folder store."""

import os
import stat
from pathlib import Path
from typing import BinaryIO, Optional

from common.logging_config import get_logger
from folderstore.config import AgentConfig
from folderstore.copier import CopyCallback, copy_file_contents
from folderstore.error_codes import ErrorCode
from folderstore.exceptions import InvalidOidError, ShortReadError, TransferFailure
from folderstore.protocol import Action, ResponseWriter, action_summary
from folderstore.storage import download_temp_path, storage_path, upload_temp_path

logger = get_logger(__name__)


def retrieve(
    config: AgentConfig,
    oid: str,
    size: Optional[int],
    action: Optional[Action],
    writer: ResponseWriter,
) -> None:
    """
    Copy a stored object into the repository's staging folder.

    Sends progress messages while copying, then a single terminal message:
    either `complete` carrying the staged file path or a transfer error.
    The host moves the staged file into its own object cache.

    Args:
        config: Agent configuration
        oid: Object id
        size: Size announced by the host (informational)
        action: Host action, passed through
        writer: Response writer for the host
    """
    logger.debug(f"Download action for {oid}: {action_summary(action)}")
    try:
        temp_path = _retrieve(config, oid, size, _progress_sender(writer, oid))
    except TransferFailure as e:
        writer.send_transfer_error(oid, e.code, e.message)
        return

    writer.send_complete(oid, str(temp_path))


def store(
    config: AgentConfig,
    oid: str,
    size: Optional[int],
    action: Optional[Action],
    from_path: Optional[str],
    writer: ResponseWriter,
) -> None:
    """
    Copy a file from the working tree into the store.

    The object only becomes visible at its store path through an atomic
    rename of a fully written temp file. If an object of the same size is
    already stored, one full-size progress message and `complete` are sent
    without copying.

    Args:
        config: Agent configuration
        oid: Object id
        size: Size announced by the host (informational)
        action: Host action, passed through
        from_path: File to upload
        writer: Response writer for the host
    """
    logger.debug(f"Upload action for {oid}: {action_summary(action)}")
    try:
        _store(config, oid, size, from_path, _progress_sender(writer, oid))
    except TransferFailure as e:
        writer.send_transfer_error(oid, e.code, e.message)
        return

    writer.send_complete(oid)


def _progress_sender(writer: ResponseWriter, oid: str) -> CopyCallback:
    def callback(total_size: int, read_so_far: int, read_since_last: int) -> None:
        writer.send_progress(oid, read_so_far, read_since_last)
    return callback


def _retrieve(config: AgentConfig, oid: str, size: Optional[int], progress: CopyCallback) -> Path:
    try:
        file_path = storage_path(config.base_dir, oid)
    except InvalidOidError as e:
        raise TransferFailure(ErrorCode.SOURCE_NOT_FOUND, f"Cannot locate object: {e}") from e

    try:
        stat_src = file_path.stat()
    except OSError as e:
        raise TransferFailure(ErrorCode.SOURCE_NOT_FOUND, f"Cannot stat {str(file_path)!r}: {e}") from e

    if not stat.S_ISREG(stat_src.st_mode):
        raise TransferFailure(
            ErrorCode.STORE_CORRUPTION,
            f"Store corruption, {str(file_path)!r} is not a regular file",
        )

    if size is not None and size != stat_src.st_size:
        logger.warning(f"Requested size {size} for {oid} differs from stored size {stat_src.st_size}")

    temp_path = download_temp_path(config.git_dir, oid)
    try:
        temp_path.parent.mkdir(parents=True, exist_ok=True)
        dl_file = open(temp_path, "wb")
    except OSError as e:
        raise TransferFailure(
            ErrorCode.DOWNLOAD_TEMP_FILE,
            f"Error creating temp file for {str(file_path)!r}: {e}",
        ) from e

    try:
        try:
            src = open(file_path, "rb")
        except OSError as e:
            raise TransferFailure(
                ErrorCode.SOURCE_NOT_READABLE,
                f"Cannot read data from {str(file_path)!r}: {e}",
            ) from e

        with src:
            try:
                copy_file_contents(stat_src.st_size, src, dl_file, progress)
            except (OSError, ShortReadError) as e:
                raise TransferFailure(
                    ErrorCode.DOWNLOAD_COPY_FAILED,
                    f"Error copy file from {str(file_path)!r}: {e}",
                ) from e

        try:
            dl_file.close()
        except OSError as e:
            raise TransferFailure(
                ErrorCode.DOWNLOAD_TEMP_FILE,
                f"can't close tempfile {str(temp_path)!r}: {e}",
            ) from e
    except BaseException:
        _discard(dl_file, temp_path)
        raise

    return temp_path


def _store(
    config: AgentConfig,
    oid: str,
    size: Optional[int],
    from_path: Optional[str],
    progress: CopyCallback,
) -> None:
    if not from_path:
        raise TransferFailure(ErrorCode.UPLOAD_SOURCE_STAT, "No source path given")

    src_path = Path(from_path)
    try:
        stat_from = src_path.stat()
    except OSError as e:
        raise TransferFailure(ErrorCode.UPLOAD_SOURCE_STAT, f"Cannot stat {from_path!r}: {e}") from e

    if size is not None and size != stat_from.st_size:
        logger.warning(f"Requested size {size} for {oid} differs from source size {stat_from.st_size}")

    try:
        dest_path = storage_path(config.base_dir, oid)
    except InvalidOidError as e:
        raise TransferFailure(ErrorCode.UPLOAD_DEST_DIR, f"Cannot locate destination: {e}") from e

    if _stored_size(dest_path) == stat_from.st_size:
        logger.info(f"Skipping {oid}, already stored")
        progress(stat_from.st_size, stat_from.st_size, stat_from.st_size)
        return

    try:
        dest_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise TransferFailure(
            ErrorCode.UPLOAD_DEST_DIR,
            f"Cannot create dir {str(dest_path.parent)!r}: {e}",
        ) from e

    temp_path = upload_temp_path(dest_path)
    try:
        temp_path.unlink(missing_ok=True)
    except OSError as e:
        raise TransferFailure(
            ErrorCode.UPLOAD_DEST_DIR,
            f"Cannot remove existing temp file {str(temp_path)!r}: {e}",
        ) from e

    try:
        src = open(src_path, "rb")
    except OSError as e:
        raise TransferFailure(ErrorCode.UPLOAD_SOURCE_OPEN, f"Cannot read data from {from_path!r}: {e}") from e

    with src:
        try:
            dst = open(temp_path, "xb")
        except OSError as e:
            raise TransferFailure(
                ErrorCode.UPLOAD_TEMP_CREATE,
                f"Cannot open temp file for writing {str(temp_path)!r}: {e}",
            ) from e

        try:
            try:
                copy_file_contents(stat_from.st_size, src, dst, progress)
                dst.close()
            except (OSError, ShortReadError) as e:
                raise TransferFailure(
                    ErrorCode.UPLOAD_COPY_FAILED,
                    f"Error writing temp file {str(temp_path)!r}: {e}",
                ) from e
        except BaseException:
            _discard(dst, temp_path)
            raise

    try:
        os.replace(temp_path, dest_path)
    except OSError as e:
        _remove_temp(temp_path)
        raise TransferFailure(
            ErrorCode.UPLOAD_RENAME_FAILED,
            f"Error moving temp file to final location: {e}",
        ) from e


def _stored_size(dest_path: Path) -> Optional[int]:
    """Size of an already stored object, None when there is nothing usable."""
    try:
        return dest_path.stat().st_size
    except OSError:
        return None


def _discard(handle: BinaryIO, temp_path: Path) -> None:
    """Close and delete a temp file after a failed transfer."""
    try:
        handle.close()
    except OSError as e:
        logger.warning(f"Error closing temp file {temp_path}: {e}")
    _remove_temp(temp_path)


def _remove_temp(temp_path: Path) -> None:
    try:
        temp_path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Unable to remove temp file {temp_path}: {e}")

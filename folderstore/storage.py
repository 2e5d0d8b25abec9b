"""Maps object ids to paths in the folder store and to staging files."""

from pathlib import Path
from typing import Union

from common.constants import DOWNLOAD_STAGING_PARTS, TEMP_SUFFIX
from folderstore.exceptions import InvalidOidError

MIN_OID_LENGTH = 4


def storage_path(base_dir: Union[str, Path], oid: str) -> Path:
    """
    Get the store path of an object.

    Uses the same two-level folder split as git-lfs itself:
    base/oid[0:2]/oid[2:4]/oid.

    Args:
        base_dir: Root folder of the store
        oid: Object id

    Returns:
        Path object for the stored object

    Raises:
        InvalidOidError: If oid is too short to split
    """
    if len(oid) < MIN_OID_LENGTH:
        raise InvalidOidError(f"oid {oid!r} is shorter than {MIN_OID_LENGTH} characters")
    return Path(base_dir) / oid[0:2] / oid[2:4] / oid


def download_staging_dir(git_dir: Union[str, Path]) -> Path:
    """Staging folder inside the repository, on the same drive as the host's object cache."""
    return Path(git_dir).joinpath(*DOWNLOAD_STAGING_PARTS)


def download_temp_path(git_dir: Union[str, Path], oid: str) -> Path:
    return download_staging_dir(git_dir) / f"{oid}{TEMP_SUFFIX}"


def upload_temp_path(dest_path: Path) -> Path:
    # sibling of the destination so the final rename never crosses volumes
    return dest_path.with_name(dest_path.name + TEMP_SUFFIX)

"""Wire values of the transfer error codes reported to the host."""

from enum import IntEnum


class ErrorCode(IntEnum):
    BASE_DIR_NOT_CONFIGURED = 9

    # download
    SOURCE_NOT_FOUND = 3
    STORE_CORRUPTION = 4
    DOWNLOAD_TEMP_FILE = 5
    SOURCE_NOT_READABLE = 6
    DOWNLOAD_COPY_FAILED = 7

    # upload
    UPLOAD_SOURCE_STAT = 13
    UPLOAD_DEST_DIR = 14
    UPLOAD_SOURCE_OPEN = 15
    UPLOAD_TEMP_CREATE = 16
    UPLOAD_COPY_FAILED = 17
    UPLOAD_RENAME_FAILED = 18

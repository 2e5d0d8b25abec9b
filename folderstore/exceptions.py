"""Custom exception classes for the transfer agent."""

from folderstore.error_codes import ErrorCode


class FolderStoreException(Exception):
    """
    Base exception class for all agent errors.
    """
    pass


class TransferFailure(FolderStoreException):
    """
    Raised by a transfer step that failed; carries the protocol error code
    reported to the host in the terminal message.
    """

    def __init__(self, code: ErrorCode, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class InvalidOidError(FolderStoreException):
    """
    Raised when an oid is too short to be split into store folders.
    """
    pass


class ShortReadError(FolderStoreException):
    """
    Raised when the source runs out of data before the expected byte count.
    """
    pass


class GitDirError(FolderStoreException):
    """
    Raised when the repository metadata directory cannot be resolved.
    """
    pass

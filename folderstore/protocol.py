"""Protocol message definitions and line-delimited JSON framing."""

from typing import Any, Dict, Literal, Optional, TextIO

from pydantic import BaseModel, ConfigDict, Field

from common.logging_config import get_logger
from folderstore.error_codes import ErrorCode

logger = get_logger(__name__)


class Action(BaseModel):
    """Transfer action supplied by the host; passed through untouched."""
    model_config = ConfigDict(extra="allow")

    href: Optional[str] = None
    header: Optional[Dict[str, str]] = None
    expires_in: Optional[int] = None
    expires_at: Optional[str] = None


class Request(BaseModel):
    """One request line sent by the host."""
    # missing event decodes as an unknown one and is ignored
    event: str = ""
    operation: Optional[str] = None
    oid: Optional[str] = None
    size: Optional[int] = None
    path: Optional[str] = None
    action: Optional[Action] = None


class TransferError(BaseModel):
    """Error attached to an init or terminal transfer response."""
    code: int
    message: str


class InitResponse(BaseModel):
    """Response to the init event."""
    error: Optional[TransferError] = None


class TransferResponse(BaseModel):
    """Terminal message of a transfer."""
    event: Literal["complete"] = "complete"
    oid: str
    path: Optional[str] = None
    error: Optional[TransferError] = None


class ProgressResponse(BaseModel):
    """Intermediate progress message of a transfer."""
    model_config = ConfigDict(populate_by_name=True)

    event: Literal["progress"] = "progress"
    oid: str
    bytes_so_far: int = Field(alias="bytesSoFar")
    bytes_since_last: int = Field(alias="bytesSinceLast")


def decode_request(line: str) -> Request:
    """
    Parse a single request line.

    Raises:
        pydantic.ValidationError: If the line is not valid JSON or not a request
    """
    return Request.model_validate_json(line)


def encode_message(message: BaseModel) -> str:
    """Serialize a response to one JSON line, unset optional fields omitted."""
    return message.model_dump_json(by_alias=True, exclude_none=True) + "\n"


def transfer_error(code: ErrorCode, message: str) -> TransferError:
    return TransferError(code=int(code), message=message)


class ResponseWriter:
    """Writes responses to the host, one flushed line per message."""

    def __init__(self, stream: TextIO):
        self._stream = stream

    def send(self, message: BaseModel) -> bool:
        """
        Write and flush one message.

        Returns:
            True if the message was written, False if the stream failed
        """
        try:
            self._stream.write(encode_message(message))
            self._stream.flush()
        except OSError as e:
            logger.error(f"Unable to send {type(message).__name__}: {e}")
            return False
        return True

    def send_progress(self, oid: str, bytes_so_far: int, bytes_since_last: int) -> bool:
        return self.send(ProgressResponse(
            oid=oid,
            bytes_so_far=bytes_so_far,
            bytes_since_last=bytes_since_last,
        ))

    def send_complete(self, oid: str, path: Optional[str] = None) -> bool:
        return self.send(TransferResponse(oid=oid, path=path))

    def send_transfer_error(self, oid: str, code: ErrorCode, message: str) -> bool:
        logger.error(f"Transfer of {oid} failed ({int(code)}): {message}")
        return self.send(TransferResponse(oid=oid, error=transfer_error(code, message)))

    def send_init(self, error: Optional[TransferError] = None) -> bool:
        return self.send(InitResponse(error=error))


def action_summary(action: Optional[Action]) -> Dict[str, Any]:
    """Action fields for debug diagnostics (header values are masked by the log filter)."""
    if action is None:
        return {}
    return action.model_dump(exclude_none=True)

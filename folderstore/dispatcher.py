"""Request loop: reads host requests line by line and routes them."""

from typing import Iterable, TextIO

from pydantic import ValidationError

from common.constants import AGENT_NAME
from common.logging_config import get_logger
from folderstore.config import AgentConfig
from folderstore.error_codes import ErrorCode
from folderstore.protocol import Request, ResponseWriter, decode_request, transfer_error
from folderstore.transfer import retrieve, store

logger = get_logger(__name__)

BASE_DIR_MISSING_MESSAGE = "Base directory not specified, check config"


class Dispatcher:
    """
    Handles one request at a time; every response is flushed before the
    next request line is read.
    """

    def __init__(self, config: AgentConfig, writer: ResponseWriter):
        self.config = config
        self.writer = writer
        self.terminated = False

    def handle_line(self, line: str) -> None:
        """Decode one input line and dispatch it; malformed lines are skipped."""
        try:
            request = decode_request(line)
        except ValidationError:
            logger.warning(f"Unable to parse request: {line.rstrip()}")
            return
        self.dispatch(request)

    def dispatch(self, request: Request) -> None:
        event = request.event
        if event == "init":
            self._handle_init(request)
        elif event == "download":
            logger.info(f"Received download request for {request.oid}")
            retrieve(self.config, request.oid or "", request.size, request.action, self.writer)
        elif event == "upload":
            logger.info(f"Received upload request for {request.oid}")
            store(self.config, request.oid or "", request.size, request.action, request.path, self.writer)
        elif event == "terminate":
            logger.info("Terminating custom adapter gracefully.")
            self.terminated = True
        else:
            logger.debug(f"Ignoring unknown event {event!r}")

    def _handle_init(self, request: Request) -> None:
        if not self.config.has_base_dir:
            self.writer.send_init(transfer_error(ErrorCode.BASE_DIR_NOT_CONFIGURED, BASE_DIR_MISSING_MESSAGE))
            return
        logger.info(f"Initialised {AGENT_NAME} custom adapter for {request.operation}")
        self.writer.send_init()


def serve(config: AgentConfig, stdin: Iterable[str], stdout: TextIO) -> None:
    """
    Run the protocol until the input ends or the host sends terminate.

    Args:
        config: Agent configuration
        stdin: Request lines from the host
        stdout: Stream for protocol responses
    """
    dispatcher = Dispatcher(config, ResponseWriter(stdout))
    for line in stdin:
        dispatcher.handle_line(line)
        if dispatcher.terminated:
            break

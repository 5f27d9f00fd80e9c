import sys
import logging
from enum import Enum
from typing import Optional

from networking.connection import Connection
from networking.errors import OperationTimeout
from utils.config import ClientConfig, SendFailurePolicy
from utils.line_buffer import LineBuffer, LineTooLongError, normalize_line

logger = logging.getLogger(__name__)

CLOSED_NOTICE = "Server closed the connection."
SEND_ERROR_NOTICE = "Error sending data."
TIMEOUT_NOTICE = "Timed out waiting for server."


class SessionEnd(Enum):
    EXIT_COMMAND = "exit_command"
    PEER_CLOSED = "peer_closed"
    INPUT_EOF = "input_eof"
    SEND_FAILED = "send_failed"
    TIMED_OUT = "timed_out"


class InteractiveClient:
    """
    Send-a-line, print-one-reply loop over an open Connection.

    Outbound and inbound traffic use separate bounded buffers, each cleared
    before reuse.
    """

    def __init__(self, connection: Connection, config: Optional[ClientConfig] = None,
                 stdin=None, stdout=None):
        self.connection = connection
        self.config = config or ClientConfig()
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.outbound = LineBuffer(self.config.buffer_size)
        self.inbound = LineBuffer(self.config.buffer_size)

    def run(self) -> SessionEnd:
        """Read the greeting, then loop until the session ends. Returns why it ended."""
        try:
            if not self.read_greeting() and self.config.require_greeting:
                self._print(CLOSED_NOTICE)
                return SessionEnd.PEER_CLOSED

            while True:
                end = self.step()
                if end is not None:
                    logger.info(f"Session ended: {end.value}")
                    return end
        except OperationTimeout as e:
            logger.warning(f"Session with {self.connection.address} timed out: {e}")
            self._print(TIMEOUT_NOTICE)
            return SessionEnd.TIMED_OUT

    def read_greeting(self) -> bool:
        """
        One receive for the server's greeting.

        Returns:
            True if a greeting was printed, False if nothing arrived
        """
        if self._receive():
            self._print_reply()
            return True
        logger.info(f"No greeting from {self.connection.address}")
        return False

    def step(self) -> Optional[SessionEnd]:
        """
        One iteration: read a line, send it, print the reply.

        Returns:
            None to keep going, otherwise the reason the session ended
        """
        line = self._read_line()
        at_eof = line is None
        if at_eof:
            logger.info("End of local input, sending exit command")
            payload = self.config.exit_payload
        else:
            try:
                payload = normalize_line(line, self.outbound.capacity)
            except LineTooLongError as e:
                self._print(f"{e}; not sent.")
                return None

        self.outbound.load(payload)
        if not self.connection.send(self.outbound.data):
            self._print(SEND_ERROR_NOTICE)
            if self.config.send_failure_policy is SendFailurePolicy.ABORT:
                return SessionEnd.SEND_FAILED

        if at_eof:
            return SessionEnd.INPUT_EOF
        if self.outbound.data == self.config.exit_payload:
            return SessionEnd.EXIT_COMMAND

        if not self._receive():
            self._print(CLOSED_NOTICE)
            return SessionEnd.PEER_CLOSED
        self._print_reply()
        return None

    def _read_line(self) -> Optional[str]:
        if self.config.prompt:
            self.stdout.write(self.config.prompt)
            self.stdout.flush()
        try:
            line = self.stdin.readline()
        except (OSError, ValueError) as e:
            logger.warning(f"Reading local input failed: {e}")
            return None
        # readline() only returns "" at end of file
        return line if line else None

    def _receive(self) -> bool:
        self.inbound.clear()
        data = self.connection.receive(self.inbound.limit)
        if not data:
            return False
        self.inbound.append(data)
        return True

    def _print_reply(self):
        reply = self.inbound.text().rstrip("\r\n")
        self._print(f"Server: {reply}")

    def _print(self, text):
        print(text, file=self.stdout, flush=True)

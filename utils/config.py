from enum import Enum
from typing import Optional

from utils.line_buffer import BUFFER_SIZE

HOST = "127.0.0.1"
PORT = 8080
EXIT_COMMAND = "exit"
PROMPT = "> "


class SendFailurePolicy(Enum):
    PROCEED = "proceed"  # report the failure and keep going
    ABORT = "abort"


class ClientConfig:
    """Settings for one client session. Defaults reproduce the fixed endpoint and blocking I/O."""

    def __init__(
        self,
        host: str = HOST,
        port: int = PORT,
        buffer_size: int = BUFFER_SIZE,
        connect_timeout: Optional[float] = None,
        io_timeout: Optional[float] = None,
        prompt: str = PROMPT,
        exit_command: str = EXIT_COMMAND,
        send_failure_policy: SendFailurePolicy = SendFailurePolicy.PROCEED,
        require_greeting: bool = False,
    ):
        self.host = host
        self.port = port
        self.buffer_size = buffer_size
        self.connect_timeout = connect_timeout
        self.io_timeout = io_timeout
        self.prompt = prompt
        self.exit_command = exit_command
        self.send_failure_policy = send_failure_policy
        self.require_greeting = require_greeting

    @property
    def exit_payload(self) -> bytes:
        return f"{self.exit_command}\n".encode()

    def __repr__(self):
        return (
            f"ClientConfig(host={self.host!r}, port={self.port}, buffer_size={self.buffer_size}, "
            f"io_timeout={self.io_timeout}, send_failure_policy={self.send_failure_policy.value})"
        )

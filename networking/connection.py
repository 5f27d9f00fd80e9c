import socket
import logging
from typing import Optional

from networking.errors import ClientError, StartupError, OperationTimeout

logger = logging.getLogger(__name__)


class Connection:
    """
    One outbound TCP stream connection to a literal IPv4 address.

    Use it as a context manager so the socket is released exactly once on
    every exit path:

        with Connection("127.0.0.1", 8080) as conn:
            conn.send(b"hello\\n")
    """

    def __init__(self, host: str, port: int, connect_timeout: Optional[float] = None,
                 io_timeout: Optional[float] = None):
        self.host = host
        self.port = port
        self.connect_timeout = connect_timeout
        self.io_timeout = io_timeout
        self._sock = None

    @property
    def address(self):
        return f"{self.host}:{self.port}"

    @property
    def is_open(self) -> bool:
        return self._sock is not None

    def open(self) -> "Connection":
        """
        Create the socket, parse the address and connect.

        Raises:
            StartupError: On socket creation, address parse or connect failure.
                Anything acquired before the failure is released first.
        """
        if self._sock is not None:
            raise ClientError(f"Connection to {self.address} is already open")

        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as e:
            logger.error(f"Socket creation failed: {e}")
            raise StartupError.from_os_error("socket", "Socket creation error.", e) from e

        try:
            socket.inet_pton(socket.AF_INET, self.host)
        except (OSError, TypeError) as e:
            sock.close()
            logger.error(f"Cannot parse address {self.host!r}: {e}")
            raise StartupError("address", "Invalid address/ Address not supported") from e

        try:
            sock.settimeout(self.connect_timeout)
            sock.connect((self.host, self.port))
        except (OSError, OverflowError) as e:
            sock.close()
            logger.error(f"Failed to connect to {self.address}: {e}")
            if isinstance(e, OSError):
                raise StartupError.from_os_error("connect", "Connection Failed.", e) from e
            raise StartupError("connect", "Connection Failed.") from e

        sock.settimeout(self.io_timeout)
        self._sock = sock
        logger.info(f"Connected to {self.address}")
        return self

    def send(self, data: bytes) -> bool:
        """
        Send the whole payload.

        Returns:
            True if every byte was handed to the OS, False if the send failed

        Raises:
            OperationTimeout: If ``io_timeout`` elapsed first
        """
        sock = self._require_open()
        try:
            sock.sendall(data)
        except socket.timeout as e:
            raise OperationTimeout("send", self.io_timeout) from e
        except OSError as e:
            logger.error(f"Error sending {len(data)} bytes to {self.address}: {e}")
            return False
        logger.debug(f"Sent {len(data)} bytes to {self.address}")
        return True

    def receive(self, bufsize: int) -> bytes:
        """
        One blocking receive of at most ``bufsize`` bytes.

        An empty result means the peer closed the connection. A reset or
        aborted connection is reported the same way.

        Raises:
            OperationTimeout: If ``io_timeout`` elapsed first
        """
        sock = self._require_open()
        try:
            data = sock.recv(bufsize)
        except socket.timeout as e:
            raise OperationTimeout("receive", self.io_timeout) from e
        except OSError as e:
            logger.warning(f"Receive from {self.address} failed, treating as closed: {e}")
            return b""
        logger.debug(f"Received {len(data)} bytes from {self.address}")
        return data

    def close(self) -> None:
        if self._sock is None:
            return
        sock, self._sock = self._sock, None
        try:
            sock.close()
        except OSError as e:
            logger.warning(f"Error closing socket for {self.address}: {e}")
        logger.info(f"Connection to {self.address} closed")

    def _require_open(self):
        if self._sock is None:
            raise ClientError(f"Connection to {self.address} is not open")
        return self._sock

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

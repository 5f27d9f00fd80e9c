import logging

logger = logging.getLogger(__name__)

BUFFER_SIZE = 1024
ENCODING = "utf-8"


class LineTooLongError(ValueError):
    """Raised when a payload does not fit in a buffer's capacity."""

    def __init__(self, length: int, limit: int):
        super().__init__(f"Line too long ({length} bytes, limit is {limit} bytes)")
        self.length = length
        self.limit = limit


class LineBuffer:
    """
    Bounded, reusable byte buffer for one direction of traffic.

    The last byte of ``capacity`` is kept free, so at most ``capacity - 1``
    bytes of content are ever held.
    """

    def __init__(self, capacity: int = BUFFER_SIZE):
        if capacity < 2:
            raise ValueError(f"Buffer capacity must be at least 2 bytes, got {capacity}")
        self.capacity = capacity
        self._data = bytearray()

    @property
    def limit(self) -> int:
        return self.capacity - 1

    @property
    def data(self) -> bytes:
        return bytes(self._data)

    def __len__(self):
        return len(self._data)

    def clear(self) -> None:
        """Zero-fill and empty the buffer so no earlier content can leak."""
        self._data[:] = bytes(len(self._data))
        self._data.clear()

    def append(self, chunk: bytes) -> None:
        """
        Append bytes, refusing anything that would exceed the limit.

        Raises:
            LineTooLongError: If the buffer would hold more than ``limit`` bytes
        """
        new_length = len(self._data) + len(chunk)
        if new_length > self.limit:
            raise LineTooLongError(new_length, self.limit)
        self._data.extend(chunk)

    def load(self, chunk: bytes) -> None:
        self.clear()
        self.append(chunk)

    def text(self) -> str:
        return self._data.decode(ENCODING, errors="replace")


def normalize_line(line: str, capacity: int = BUFFER_SIZE) -> bytes:
    """
    Encode a line of user input and make sure it ends with a newline.

    A line that already ends in a newline is returned unchanged; an empty line
    stays empty.

    Args:
        line: Text as read from the terminal
        capacity: Capacity of the outbound buffer

    Returns:
        The encoded payload

    Raises:
        LineTooLongError: If the payload (newline included) exceeds ``capacity - 1``
    """
    payload = line.encode(ENCODING)
    if payload and not payload.endswith(b"\n"):
        payload += b"\n"

    limit = capacity - 1
    if len(payload) > limit:
        logger.debug(f"Rejecting {len(payload)}-byte line, limit is {limit}")
        raise LineTooLongError(len(payload), limit)
    return payload

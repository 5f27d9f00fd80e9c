import logging
import sys

from networking.connection import Connection
from networking.errors import StartupError
from networking.session import InteractiveClient, SessionEnd
from utils.config import ClientConfig

LOG_LEVEL = logging.WARNING

# Closing on the peer's side is a normal end of session, not an error
EXIT_STATUS = {
    SessionEnd.EXIT_COMMAND: 0,
    SessionEnd.PEER_CLOSED: 0,
    SessionEnd.INPUT_EOF: 0,
    SessionEnd.SEND_FAILED: 1,
    SessionEnd.TIMED_OUT: 1,
}

logger = logging.getLogger(__name__)


def main(config=None, stdin=None, stdout=None) -> int:
    """Connect, run one interactive session and return the process exit status."""
    config = config or ClientConfig()
    out = stdout if stdout is not None else sys.stdout

    try:
        with Connection(config.host, config.port, config.connect_timeout, config.io_timeout) as conn:
            end = InteractiveClient(conn, config, stdin=stdin, stdout=stdout).run()
    except StartupError as e:
        print(str(e), file=out, flush=True)
        return 1

    logger.debug(f"Exiting after {end.value}")
    return EXIT_STATUS[end]


def run():
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(message)s",
        stream=sys.stderr
    )
    try:
        status = main()
    except KeyboardInterrupt:
        print("\nClient shutting down...")
        status = 130
    sys.exit(status)


if __name__ == "__main__":
    run()

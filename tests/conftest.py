import socket
import pytest

from networking.testing.echo_server import EchoServer


class ScriptedConnection:
    """Stands in for Connection: replays canned replies and records what was sent."""

    address = "127.0.0.1:8080"

    def __init__(self, replies, send_results=None):
        self.replies = list(replies)
        self.send_results = list(send_results or [])
        self.sent = []
        self.receive_calls = 0

    def send(self, data):
        self.sent.append(data)
        if self.send_results:
            return self.send_results.pop(0)
        return True

    def receive(self, bufsize):
        self.receive_calls += 1
        reply = self.replies.pop(0) if self.replies else b""
        if isinstance(reply, Exception):
            raise reply
        return reply[:bufsize]


@pytest.fixture
def echo_server():
    servers = []

    def start(**kwargs):
        server = EchoServer(**kwargs).start()
        servers.append(server)
        return server

    yield start
    for server in servers:
        server.stop()


@pytest.fixture
def free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]

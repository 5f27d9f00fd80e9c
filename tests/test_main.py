import errno
import io
import socket
import pytest
from unittest import mock

import main
from utils.config import ClientConfig, SendFailurePolicy


class TestExitStatus:

    def test_connect_failure_is_fatal(self, free_port):
        stdout = io.StringIO()
        with mock.patch("main.InteractiveClient") as mock_client:
            status = main.main(ClientConfig(port=free_port), stdin=io.StringIO("hello\n"), stdout=stdout)
        assert status == 1
        assert "Connection Failed. Error Code:" in stdout.getvalue()
        mock_client.assert_not_called()

    def test_malformed_address_is_fatal(self):
        stdout = io.StringIO()
        status = main.main(ClientConfig(host="127.0.0.256"), stdin=io.StringIO(""), stdout=stdout)
        assert status == 1
        assert "Invalid address/ Address not supported" in stdout.getvalue()

    def test_exit_command_status(self, echo_server):
        server = echo_server()
        stdout = io.StringIO()
        config = ClientConfig(port=server.port, io_timeout=5.0)
        assert main.main(config, stdin=io.StringIO("hello\nexit\n"), stdout=stdout) == 0
        assert "Server: ECHO:hello" in stdout.getvalue()

    def test_peer_closed_matches_exit_status(self, echo_server):
        server = echo_server(replies_before_close=0)
        config = ClientConfig(port=server.port, io_timeout=5.0)
        stdout = io.StringIO()
        assert main.main(config, stdin=io.StringIO("hello\n"), stdout=stdout) == 0
        assert "Server closed the connection." in stdout.getvalue()

    def test_end_of_input_status(self, echo_server):
        server = echo_server()
        config = ClientConfig(port=server.port, io_timeout=5.0)
        stdout = io.StringIO()
        assert main.main(config, stdin=io.StringIO("hello\n"), stdout=stdout) == 0
        assert "Server: ECHO:hello" in stdout.getvalue()

    def test_aborted_send_is_an_error(self, echo_server):
        server = echo_server()
        config = ClientConfig(port=server.port, io_timeout=5.0,
                              send_failure_policy=SendFailurePolicy.ABORT)
        stdout = io.StringIO()
        with mock.patch("main.Connection.send", return_value=False):
            status = main.main(config, stdin=io.StringIO("hello\nexit\n"), stdout=stdout)
        assert status == 1
        assert "Error sending data." in stdout.getvalue()

    def test_connect_timeout_is_fatal(self):
        stdout = io.StringIO()
        with mock.patch("networking.connection.socket.socket") as mock_socket:
            mock_socket.return_value.connect.side_effect = socket.timeout("timed out")
            status = main.main(ClientConfig(connect_timeout=0.5), stdin=io.StringIO(""), stdout=stdout)
        assert status == 1
        assert f"Connection Failed. Error Code: {errno.ETIMEDOUT}" in stdout.getvalue()
        mock_socket.return_value.close.assert_called_once()

    def test_timeout_is_an_error(self, echo_server):
        server = echo_server(greeting=None)
        config = ClientConfig(port=server.port, io_timeout=0.2)
        assert main.main(config, stdin=io.StringIO("hello\n"), stdout=io.StringIO()) == 1

    def test_default_config_targets_fixed_endpoint(self):
        config = ClientConfig()
        assert (config.host, config.port, config.buffer_size) == ("127.0.0.1", 8080, 1024)
        assert config.connect_timeout is None and config.io_timeout is None


class TestRun:

    def test_exits_with_session_status(self):
        with mock.patch("main.main", return_value=0), mock.patch("main.logging.basicConfig"):
            with pytest.raises(SystemExit) as exc_info:
                main.run()
        assert exc_info.value.code == 0

    def test_keyboard_interrupt(self, capsys):
        with mock.patch("main.main", side_effect=KeyboardInterrupt), mock.patch("main.logging.basicConfig"):
            with pytest.raises(SystemExit) as exc_info:
                main.run()
        assert exc_info.value.code == 130
        assert "shutting down" in capsys.readouterr().out

"""
Unit tests for the TCP acceptor.
"""

import socket
import threading

import pytest

from staticserver.config import ServerConfig
from staticserver.core import Connection, InlineDispatcher, SocketServer


def start_in_background(server: SocketServer, handler) -> threading.Thread:
    thread = threading.Thread(target=server.start, args=(handler,), daemon=True)
    thread.start()
    assert server.wait_until_listening(5.0)
    return thread


class TestSocketServer:

    def test_ephemeral_port(self):
        server = SocketServer(ServerConfig(host="127.0.0.1", port=0))
        thread = start_in_background(server, lambda conn: conn.close())

        try:
            host, port = server.address
            assert host == "127.0.0.1"
            assert port != 0
            assert server.is_running
        finally:
            server.shutdown()
            thread.join(5.0)

        assert not thread.is_alive()
        assert not server.is_running

    def test_hands_connections_to_handler(self):
        received = []
        got_one = threading.Event()

        def handler(conn: Connection):
            with conn:
                received.append(conn.read_request_line())
                conn.send_response(b"ack")
            got_one.set()

        server = SocketServer(ServerConfig(host="127.0.0.1", port=0), dispatcher=InlineDispatcher())
        thread = start_in_background(server, handler)

        try:
            with socket.create_connection(server.address, timeout=5.0) as client:
                client.sendall(b"GET / HTTP/1.1\r\n")
                assert client.recv(16) == b"ack"
            assert got_one.wait(5.0)
        finally:
            server.shutdown()
            thread.join(5.0)

        assert received == [b"GET / HTTP/1.1\r\n"]

    def test_bind_failure_is_raised(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as blocker:
            blocker.bind(("127.0.0.1", 0))
            blocker.listen(1)
            port = blocker.getsockname()[1]

            server = SocketServer(ServerConfig(host="127.0.0.1", port=port))
            with pytest.raises(OSError):
                server.start(lambda conn: conn.close())

        assert not server.is_running

    def test_shutdown_is_idempotent(self):
        server = SocketServer(ServerConfig(port=0))
        server.shutdown()
        server.shutdown()
        assert server.wait_for_shutdown(0)

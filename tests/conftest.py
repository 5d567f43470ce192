# tests/conftest.py
import socket
import sys
import threading
from pathlib import Path

import pytest

# 确保 src 目录在 sys.path 中
src_path = Path(__file__).resolve().parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from rcon_core.config import RconConfig
from rcon_core.network import SocketStream
from rcon_core.protocols.constants import Command
from rcon_core.protocols.packet import Packet, decode_packet, encode_packet

TEST_PASSWORD = "sesame"


class FakeServer:
    """socketpair 的服务端一侧，用于模拟 RCON 服务器。"""

    def __init__(self, sock: socket.socket) -> None:
        self.sock = sock
        self.stream = SocketStream(sock)

    def read(self) -> Packet | None:
        return decode_packet(self.stream)

    def reply(self, request_id: int, command_type=Command.RESPONSE, payload=b""):
        self.sock.sendall(encode_packet(Packet(command_type, payload), request_id))

    def write(self, data: bytes) -> None:
        self.sock.sendall(data)

    def hang_up(self) -> None:
        """关闭写方向，客户端随后读到 EOF，但仍可继续发送。"""
        self.sock.shutdown(socket.SHUT_WR)

    def serve(self, handler) -> threading.Thread:
        """在后台线程中运行 handler(self)。"""
        thread = threading.Thread(target=handler, args=(self,), daemon=True)
        thread.start()
        return thread


@pytest.fixture
def socket_pair():
    """
    [Fixture] 返回 (客户端 socket, FakeServer)。
    """
    client_sock, server_sock = socket.socketpair()
    client_sock.settimeout(5)
    server_sock.settimeout(5)
    yield client_sock, FakeServer(server_sock)
    client_sock.close()
    server_sock.close()


@pytest.fixture
def tcp_server():
    """
    [Fixture] 在 127.0.0.1 的随机端口上监听，接受一个连接并交给 handler。

    用法: port, thread = tcp_server(handler)
    """
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind(("127.0.0.1", 0))
    listener.listen(1)
    listener.settimeout(5)

    def start(handler):
        def run():
            conn, _ = listener.accept()
            conn.settimeout(5)
            with conn:
                handler(FakeServer(conn))

        thread = threading.Thread(target=run, daemon=True)
        thread.start()
        return listener.getsockname()[1], thread

    yield start
    listener.close()


@pytest.fixture
def password() -> str:
    return TEST_PASSWORD


@pytest.fixture
def auth_handler():
    """
    [Fixture] 模拟服务器认证逻辑: 密码正确则回显 request id，否则回 -1。
    """

    def handler(server: FakeServer) -> None:
        packet = server.read()
        request_id = packet.request_id
        if packet.payload != TEST_PASSWORD.encode():
            request_id = -1
        # 服务器以 EXEC_COMMAND (2) 表示认证成功
        server.reply(request_id, Command.EXEC_COMMAND)

    return handler


@pytest.fixture
def valid_config():
    return RconConfig(
        host="localhost",
        password=TEST_PASSWORD,
        port=25575,
        timeout=5.0,
    )

# tests/test_auth.py
"""
测试 RCON 认证握手的状态流转。
重点验证:
1. 正确密码 -> AUTHENTICATED；错误密码 (id = -1) -> REJECTED 且不抛异常。
2. 双响应兼容: 最多多读一次，第二次仍不是认证标记则 FAILED。
3. 连接提前关闭、request id 无法识别 -> AuthenticationError。
"""

import io
from unittest.mock import MagicMock

import pytest

from rcon_core import RconClient
from rcon_core.exceptions import AuthenticationError, InvalidResponseError
from rcon_core.protocols.constants import AUTH_REJECTED_ID, Command
from rcon_core.state import AuthStatus

# 每个新连接的第一个 request id
AUTH_ID = 1


@pytest.mark.parametrize(
    "secret, expected, status",
    [
        ("sesame", True, AuthStatus.AUTHENTICATED),
        ("open sesame", False, AuthStatus.REJECTED),
    ],
)
def test_authenticate_against_server(socket_pair, auth_handler, secret, expected, status):
    client_sock, server = socket_pair
    client = RconClient(client_sock)
    thread = server.serve(auth_handler)

    assert client.authenticate(secret) is expected
    assert client.state.auth_status is status
    thread.join(timeout=5)


def test_auth_packet_on_the_wire(socket_pair):
    client_sock, server = socket_pair
    client = RconClient(client_sock)
    server.reply(AUTH_ID, Command.EXEC_COMMAND)

    client.authenticate("sesame")

    packet = server.read()
    assert packet.command_type is Command.AUTH
    assert packet.payload == b"sesame"
    assert packet.request_id == AUTH_ID


def test_authenticate_double_response(socket_pair):
    """某些 Minecraft 服务器先回一个空 RESPONSE，再回认证标记"""
    client_sock, server = socket_pair
    client = RconClient(client_sock)
    server.reply(AUTH_ID, Command.RESPONSE)
    server.reply(AUTH_ID, Command.EXEC_COMMAND)

    assert client.authenticate("sesame") is True
    assert client.state.is_authenticated


def test_authenticate_double_response_rejected(socket_pair):
    client_sock, server = socket_pair
    client = RconClient(client_sock)
    server.reply(AUTH_ID, Command.RESPONSE)
    server.reply(AUTH_REJECTED_ID, Command.EXEC_COMMAND)

    assert client.authenticate("wrong") is False
    assert client.state.auth_status is AuthStatus.REJECTED


def test_authenticate_two_non_marker_responses(socket_pair):
    client_sock, server = socket_pair
    client = RconClient(client_sock)
    server.reply(AUTH_ID, Command.RESPONSE)
    server.reply(AUTH_ID, Command.RESPONSE)

    with pytest.raises(AuthenticationError) as exc_info:
        client.authenticate("sesame")

    assert isinstance(exc_info.value.__cause__, InvalidResponseError)
    assert client.state.auth_status is AuthStatus.FAILED


def test_authenticate_does_not_read_a_third_time(socket_pair):
    """第三个响应即使是认证标记也不会被读取"""
    client_sock, server = socket_pair
    client = RconClient(client_sock)
    server.reply(AUTH_ID, Command.RESPONSE)
    server.reply(AUTH_ID, 7)
    server.reply(AUTH_ID, Command.EXEC_COMMAND)

    with pytest.raises(AuthenticationError):
        client.authenticate("sesame")

    assert client.read().command_type is Command.EXEC_COMMAND


def test_authenticate_connection_closed(socket_pair):
    client_sock, server = socket_pair
    client = RconClient(client_sock)
    server.hang_up()

    with pytest.raises(AuthenticationError, match="关闭"):
        client.authenticate("sesame")

    assert client.state.auth_status is AuthStatus.FAILED


def test_authenticate_closed_after_first_response(socket_pair):
    client_sock, server = socket_pair
    client = RconClient(client_sock)
    server.reply(AUTH_ID, Command.RESPONSE)
    server.hang_up()

    with pytest.raises(AuthenticationError):
        client.authenticate("sesame")


def test_authenticate_unrecognized_request_id(socket_pair):
    client_sock, server = socket_pair
    client = RconClient(client_sock)
    server.reply(42, Command.EXEC_COMMAND)

    with pytest.raises(AuthenticationError, match="Unrecognized request_id 42"):
        client.authenticate("sesame")

    assert client.state.auth_status is AuthStatus.FAILED


def test_initial_auth_status():
    assert RconClient(io.BytesIO()).state.auth_status is AuthStatus.START


def test_authenticate_send_failure_marks_failed():
    stream = MagicMock()
    stream.closed = False
    stream.write.side_effect = BrokenPipeError("peer gone")
    client = RconClient(stream)

    with pytest.raises(BrokenPipeError):
        client.authenticate("sesame")

    assert client.state.auth_status is AuthStatus.FAILED

# File: src/rcon_core/protocols/auth.py
"""
RCON 认证握手 (Authentication Handshake)

每个连接建立后执行一次:

    START -> AUTH_SENT -> AWAITING_RESPONSE -> AUTHENTICATED | REJECTED | FAILED

响应语义:
- command type 为 EXEC_COMMAND (2) 的包是“认证成功标记”。
- 标记包的 request id 等于 AUTH 请求的 id -> 认证成功。
- 标记包的 request id 为 -1 -> 密码错误 (不抛异常，返回 False)。
"""

import logging
from typing import TYPE_CHECKING

from ..exceptions import AuthenticationError, InvalidResponseError
from ..state import AuthStatus
from .constants import AUTH_REJECTED_ID, MAX_AUTH_READS, Command
from .packet import Packet

if TYPE_CHECKING:
    from ..client import RconClient
    from ..state import RconState

logger = logging.getLogger(__name__)


def is_auth_response(packet: Packet) -> bool:
    """判断一个包是否携带认证成功标记。"""
    return isinstance(packet.command_type, Command) and (
        packet.command_type.is_auth_response
    )


def authenticate(client: "RconClient", state: "RconState", password: str) -> bool:
    """执行 AUTH 握手。

    某些 Minecraft 服务器会对一次 AUTH 返回两个响应 (先是一个空的
    RESPONSE)，因此最多读取 MAX_AUTH_READS 次来寻找认证标记，不会无限重试。

    Args:
        client: 已连接的 RCON 客户端。
        state: 该连接的共享状态对象，握手过程中会更新 auth_status。
        password: RCON 密码。

    Returns:
        bool: 认证成功返回 True，密码被拒绝返回 False。

    Raises:
        AuthenticationError: 连接提前关闭、未收到认证标记或 request id 无法识别。
    """
    state.auth_status = AuthStatus.START

    try:
        auth_request_id = client.send(password, Command.AUTH)
    except Exception:
        state.auth_status = AuthStatus.FAILED
        raise
    state.auth_status = AuthStatus.AUTH_SENT
    logger.debug(f"AUTH 已发送 (id={auth_request_id})")

    state.auth_status = AuthStatus.AWAITING_RESPONSE
    for attempt in range(1, MAX_AUTH_READS + 1):
        packet = client.read()
        if packet is None:
            state.auth_status = AuthStatus.FAILED
            raise AuthenticationError("连接在认证响应前已关闭")

        if is_auth_response(packet):
            break

        logger.warning(
            f"第 {attempt} 个认证响应不是认证标记 (type={packet.command_type})"
        )
    else:
        state.auth_status = AuthStatus.FAILED
        raise AuthenticationError("未收到认证标记") from InvalidResponseError(
            f"unexpected command type {packet.command_type}"
        )

    if packet.request_id == auth_request_id:
        state.auth_status = AuthStatus.AUTHENTICATED
        logger.info("RCON 认证成功")
        return True

    if packet.request_id == AUTH_REJECTED_ID:
        state.auth_status = AuthStatus.REJECTED
        logger.warning("RCON 认证被拒绝: 密码错误")
        return False

    state.auth_status = AuthStatus.FAILED
    raise AuthenticationError(f"Unrecognized request_id {packet.request_id}")

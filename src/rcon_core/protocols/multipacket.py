# File: src/rcon_core/protocols/multipacket.py
"""
多帧响应重组 (Multi-packet Response)

RconClient.read() 每次只返回一个帧。超过 4096 字节的响应会被服务器拆成
多个 RESPONSE 帧，本模块在 read() 之上提供可选的重组：

1. 发送命令 (id = A)。
2. 紧接着发送一个空的 RESPONSE 包作为结束标记 (id = B)。
3. 服务器按顺序处理，所有 id = A 的帧都会先于 id = B 的帧到达。
4. Source 服务器会回显空标记，随后再发一个负载为 00 01 00 00 的 id = B 帧；
   若回显为空，则一并读掉这个后续帧。
"""

import logging
from typing import TYPE_CHECKING

from ..exceptions import InvalidResponseError
from .constants import Command
from .packet import Packet

if TYPE_CHECKING:
    from ..client import RconClient

logger = logging.getLogger(__name__)

SOURCE_MARKER_ECHO = b"\x00\x01\x00\x00"


def read_multipacket_response(client: "RconClient", command: str) -> str | None:
    """发送 command 并把所有响应帧拼接为一个完整的响应文本。

    Returns:
        str | None: 完整响应；中途连接关闭时返回 None。

    Raises:
        InvalidResponseError: 收到既不属于命令也不属于结束标记的帧。
    """
    request_id = client.send(command, Command.EXEC_COMMAND)
    marker_id = client.send(Packet(Command.RESPONSE, b""))

    fragments = []
    while True:
        packet = client.read()
        if packet is None:
            return None

        if packet.request_id == request_id:
            fragments.append(packet.payload)
            continue

        if packet.request_id != marker_id:
            raise InvalidResponseError(
                f"invalid request id {packet.request_id} returned"
            )

        if not packet.payload:
            echo = client.read()
            if echo is None:
                return None
            if echo.request_id != marker_id or echo.payload != SOURCE_MARKER_ECHO:
                raise InvalidResponseError("结束标记的后续帧无效")
        break

    logger.debug(f"多帧响应已重组: {len(fragments)} 帧")
    return b"".join(fragments).decode(client.encoding, errors="replace")

# File: src/rcon_core/protocols/packet.py
"""
RCON 协议封包编解码器 (Packet Codec)

负责逻辑 Packet 与线上帧之间的相互转换:

    [length:4][request id:4][command type:4][payload:N][0x00][0x00]

所有整数均为小端有符号 32 位，length = 10 + N。
本模块是无状态的 (Stateless)，不持有任何连接或会话信息。
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..exceptions import FormatError, IncompleteReadError
from .constants import (
    FRAME_HEADER,
    HEADER_SIZE,
    INT32,
    MAX_PACKET_SIZE,
    PACKET_HEADER,
    TERMINATOR,
    Command,
)

if TYPE_CHECKING:
    from ..network import ByteStream

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Packet:
    """RCON 协议中的单条消息。

    Attributes:
        command_type: 命令类型。未知的 int32 值保留为 int。
        payload: 原始负载字节 (命令文本或响应文本)。
        request_id: 请求 ID。发出的包可为 None (由连接引擎分配)，
            解析得到的包总是带有线上的值。
    """

    command_type: Command | int
    payload: bytes = b""
    request_id: int | None = None

    @classmethod
    def from_text(
        cls,
        command_type: Command | int,
        text: str | bytes,
        encoding: str = "utf-8",
    ) -> "Packet":
        """由文本 (或字节) 构建一个待发送的包。"""
        payload = text.encode(encoding) if isinstance(text, str) else bytes(text)
        return cls(Command.coerce(command_type), payload)

    @property
    def size(self) -> int:
        """帧长度字段的值 (不含长度字段自身的 4 字节)。"""
        return HEADER_SIZE + len(self.payload)

    def text(self, encoding: str = "utf-8") -> str:
        return self.payload.decode(encoding, errors="replace")


# =========================================================================
# Encode
# =========================================================================


def encode_packet(packet: Packet, request_id: int) -> bytes:
    """将 Packet 序列化为完整的线上帧。

    不在此处限制长度，调用方需自行保证负载不超过 4086 字节，
    否则服务器可能拒绝该帧。

    Args:
        packet: 待发送的包。
        request_id: 实际使用的请求 ID (覆盖 packet.request_id)。

    Returns:
        bytes: 长度前缀 + 头部 + 负载 + 两个 0x00。
    """
    header = FRAME_HEADER.pack(packet.size, request_id, int(packet.command_type))
    return header + packet.payload + TERMINATOR


# =========================================================================
# Decode
# =========================================================================


def decode_packet(stream: "ByteStream") -> Packet | None:
    """从字节流中读取并解析一个完整帧。

    Args:
        stream: 满足 ByteStream 约定的字节流。

    Returns:
        Packet | None: 解析出的包；若流已关闭或在新帧开始处遇到 EOF，
        返回 None (对端正常关闭)。

    Raises:
        FormatError: 长度越界或终止字节非零。
        IncompleteReadError: 帧中途遇到 EOF。
    """
    if stream.closed:
        return None

    # 1. 长度前缀: 仅此处的 EOF 被视为正常关闭
    try:
        raw_size = stream.read_exactly(INT32.size)
    except IncompleteReadError:
        logger.debug("读取帧长度时遇到 EOF，视为连接关闭")
        return None

    (packet_size,) = INT32.unpack(raw_size)
    if not HEADER_SIZE <= packet_size <= MAX_PACKET_SIZE:
        raise FormatError(f"packet size {packet_size}")

    # 2. 头部与负载
    request_id, command_type = PACKET_HEADER.unpack(
        stream.read_exactly(PACKET_HEADER.size)
    )
    payload = stream.read_exactly(packet_size - HEADER_SIZE)

    # 3. 终止字节
    terminator = stream.read_exactly(len(TERMINATOR))
    if terminator != TERMINATOR:
        raise FormatError(f"invalid packet terminator {terminator.hex()}")

    packet = Packet(Command.coerce(command_type), payload, request_id)
    logger.debug(
        f"decode_packet: id={request_id} type={command_type} size={packet_size}"
    )
    return packet

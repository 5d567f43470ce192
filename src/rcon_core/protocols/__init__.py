# src/rcon_core/protocols/__init__.py
"""
RCON 协议层 (Protocol Layer)

- constants / packet: 帧的纯粹构建 (Encode) 与解析 (Decode)，不持有连接状态。
- auth: 建立连接后执行一次的认证握手。
- multipacket: 构建在 read() 之上的可选多帧重组。
"""

from . import constants
from .auth import authenticate, is_auth_response
from .constants import Command
from .multipacket import read_multipacket_response
from .packet import Packet, decode_packet, encode_packet

# 公共 API
__all__ = [
    "constants",
    "Command",
    "Packet",
    "encode_packet",
    "decode_packet",
    "authenticate",
    "is_auth_response",
    "read_multipacket_response",
]

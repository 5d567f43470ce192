# src/rcon_core/protocols/constants.py
"""
RCON 协议层 - 常量定义

本模块定义了所有协议相关的魔法数字与帧结构常量。
"""

import struct
from enum import IntEnum

# =========================================================================
# 1. 命令类型 (Command Types)
# =========================================================================


class Command(IntEnum):
    """RCON 命令类型。

    线上以 4 字节小端有符号整数编码。协议允许任意 int32，
    未知值经 coerce() 后保留为普通 int，不会报错。
    """

    AUTH = 3
    EXEC_COMMAND = 2
    RESPONSE = 0

    @classmethod
    def coerce(cls, value: int) -> "Command | int":
        """将整数映射为已知枚举成员，未知值原样返回。"""
        try:
            return cls(value)
        except ValueError:
            return int(value)

    @property
    def is_auth_response(self) -> bool:
        """认证成功标记。

        对 AUTH 请求的响应中，协议复用 EXEC_COMMAND (2) 表示“认证通过”。
        """
        return self is Command.EXEC_COMMAND


# =========================================================================
# 2. 帧结构 (Frame Layout)
# =========================================================================

# request id(4) + command type(4) + 两个终止字节(2)
HEADER_SIZE = 10
MAX_PACKET_SIZE = 4096
MAX_PAYLOAD_SIZE = MAX_PACKET_SIZE - HEADER_SIZE

TERMINATOR = b"\x00\x00"

INT32 = struct.Struct("<i")
FRAME_HEADER = struct.Struct("<iii")  # length, request id, command type
PACKET_HEADER = struct.Struct("<ii")  # request id, command type

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

# =========================================================================
# 3. 认证 (Auth)
# =========================================================================

# 服务器以 request id = -1 表示密码错误
AUTH_REJECTED_ID = -1

# 某些 Minecraft 服务器会对一次 AUTH 返回两个响应
MAX_AUTH_READS = 2

# 关闭连接前发送的礼貌命令
CLOSE_COMMAND = "close"

DEFAULT_PORT = 25575


def wrap_int32(value: int) -> int:
    """将任意整数折回有符号 32 位范围 (模拟 int32 溢出)。"""
    return ((value - INT32_MIN) % 2**32) + INT32_MIN

# File: src/rcon_core/state.py
"""
RCON 核心库 - 状态模块

负责定义和存储连接引擎的易变状态。
本模块不包含业务逻辑，仅作为数据容器供 Client 与握手流程共享读写。
"""

from dataclasses import dataclass
from enum import Enum, auto


class AuthStatus(Enum):
    """认证握手的状态枚举。

    状态流转示意:
    START -> AUTH_SENT -> AWAITING_RESPONSE -> AUTHENTICATED
                                  |
                                  +-------> REJECTED
                                  |
                                  +-------> FAILED
    """

    START = auto()
    """初始状态，连接已建立但尚未发送 AUTH 包。"""

    AUTH_SENT = auto()
    """AUTH 包已发出，已记录其 request id。"""

    AWAITING_RESPONSE = auto()
    """正在等待 (或重读) 认证响应。"""

    AUTHENTICATED = auto()
    """认证成功，连接可用于执行命令。"""

    REJECTED = auto()
    """服务器以 request id = -1 拒绝 (密码错误)。"""

    FAILED = auto()
    """握手异常终止 (连接提前关闭、响应无法识别)。"""


@dataclass
class RconState:
    """存储单个 RCON 连接的易变状态数据。

    该对象随连接创建，连接关闭后不再有意义。

    Attributes:
        request_id: 最近一次分配的请求 ID，从 0 开始，先自增后使用。
        closed: close() 是否已被调用。
        auth_status: 认证握手的当前状态。
    """

    request_id: int = 0
    closed: bool = False
    auth_status: AuthStatus = AuthStatus.START

    @property
    def is_authenticated(self) -> bool:
        return self.auth_status is AuthStatus.AUTHENTICATED

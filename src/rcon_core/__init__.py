# src/rcon_core/__init__.py
"""
RCON-Core v1.0.0
RCON (Remote CONsole) 协议客户端核心库，适用于 Minecraft 与 Source 引擎服务器。
"""

# 暴露核心配置
from .config import (
    RconConfig,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
    parse_rcon_uri,
)

# 暴露引擎与状态
from .client import RconClient

# 暴露异常体系 (方便上层 try-except)
from .exceptions import (
    AuthenticationError,
    ConfigError,
    FormatError,
    IncompleteReadError,
    InvalidResponseError,
    NetworkError,
    RconError,
)
from .protocols import Command, Packet, read_multipacket_response
from .state import AuthStatus, RconState

__version__ = "1.0.0"

__all__ = [
    "RconClient",
    "RconConfig",
    "RconState",
    "AuthStatus",
    "Command",
    "Packet",
    "read_multipacket_response",
    "create_config_from_dict",
    "load_config_from_env",
    "load_config_from_toml",
    "parse_rcon_uri",
    "RconError",
    "ConfigError",
    "NetworkError",
    "IncompleteReadError",
    "FormatError",
    "InvalidResponseError",
    "AuthenticationError",
]

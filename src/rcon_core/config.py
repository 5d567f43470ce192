"""
RCON 核心库 - 配置模块

负责连接配置的加载、解析与强类型转换。
支持从 TOML 文件、环境变量 (.env)、字典或 rcon:// URI 中加载配置。
"""

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlsplit

from dotenv import load_dotenv

from .exceptions import ConfigError
from .protocols.constants import DEFAULT_PORT

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0
URI_SCHEME = "rcon"


@dataclass(frozen=True)
class RconConfig:
    """RCON 连接的强类型配置对象。

    所有字段均为只读 (frozen=True)，确保配置在运行时不可变。

    Attributes:
        host: 服务器地址 (域名或 IP)。
        password: RCON 密码。
        port: 服务器端口 (Minecraft 默认 25575)。
        timeout: Socket 超时秒数，None 表示一直阻塞。
        encoding: 命令与响应文本的编码。
    """

    host: str
    password: str
    port: int = DEFAULT_PORT
    timeout: float | None = DEFAULT_TIMEOUT
    encoding: str = "utf-8"

    def __repr__(self) -> str:
        """隐藏密码字段，防止日志泄露敏感信息。"""
        return (
            f"<{self.__class__.__name__} "
            f"server={self.host}:{self.port}, "
            f"password='******', "
            f"timeout={self.timeout}>"
        )


def create_config_from_dict(raw_data: dict[str, Any]) -> RconConfig:
    """通用工厂：将字典转换为强类型配置对象。

    Args:
        raw_data: 原始配置字典 (来自 TOML 或 Env)。

    Returns:
        RconConfig: 验证并转换后的配置对象。

    Raises:
        ConfigError: 当必要字段缺失或格式错误时抛出。
    """

    def _req(key: str) -> Any:
        """获取必要字段，缺失则报错"""
        if key not in raw_data or raw_data[key] in (None, ""):
            raise ConfigError(f"配置缺失: 缺少必要字段 '{key}'")
        return raw_data[key]

    def _to_port(key: str) -> int:
        val = raw_data.get(key, DEFAULT_PORT)
        try:
            port = int(val)
        except (TypeError, ValueError):
            raise ConfigError(f"端口格式无效 '{key}': {val}")
        if not 0 < port < 65536:
            raise ConfigError(f"端口超出范围 '{key}': {port}")
        return port

    def _to_timeout(key: str) -> float | None:
        """缺省为 DEFAULT_TIMEOUT，空值表示不设超时"""
        if key not in raw_data:
            return DEFAULT_TIMEOUT
        val = raw_data[key]
        if val is None or val == "":
            return None
        try:
            timeout = float(val)
        except (TypeError, ValueError):
            raise ConfigError(f"超时格式无效 '{key}': {val}")
        if timeout <= 0:
            raise ConfigError(f"超时必须为正数 '{key}': {timeout}")
        return timeout

    return RconConfig(
        host=str(_req("host")),
        password=str(_req("password")),
        port=_to_port("port"),
        timeout=_to_timeout("timeout"),
        encoding=str(raw_data.get("encoding") or "utf-8"),
    )


def load_config_from_toml(file_path: Path, profile: str = "default") -> RconConfig:
    """从 TOML 文件加载配置。

    支持多层级查找策略:
    1. [profile.xxx]: 优先查找指定的 profile 块。
    2. [rcon]: 单服务器配置块。
    3. Root: 兼容根目录直接配置。

    Raises:
        ConfigError: 文件读取失败或 Profile 不存在。
    """
    if not file_path.exists():
        raise ConfigError(f"配置文件未找到: {file_path}")

    try:
        with open(file_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"读取 TOML 失败: {e}") from e

    if "profile" in data:
        if profile not in data["profile"]:
            raise ConfigError(f"未找到预设: [profile.{profile}]")
        raw_config = data["profile"][profile]
    elif "rcon" in data:
        if profile != "default":
            logger.warning(f"配置仅包含 [rcon] 节，忽略 profile='{profile}'。")
        raw_config = data["rcon"]
    else:
        raw_config = data

    return create_config_from_dict(raw_config)


def load_config_from_env(env_file: Path | None = None) -> RconConfig:
    """从环境变量加载配置 (Docker/Cloud Friendly)。

    读取 `RCON_` 开头的环境变量，例如 `RCON_HOST` -> `host`。
    如果给出 env_file，会先用 python-dotenv 将其载入环境 (覆盖已有值)。

    Raises:
        ConfigError: .env 文件不存在，或未检测到任何相关环境变量。
    """
    if env_file is not None:
        if not env_file.exists():
            raise ConfigError(f".env 文件未找到: {env_file}")
        load_dotenv(dotenv_path=env_file, override=True)

    env_map = {
        "host": "HOST",
        "port": "PORT",
        "password": "PASSWORD",
        "timeout": "TIMEOUT",
        "encoding": "ENCODING",
    }

    raw_data = {}
    for cfg_key, env_suffix in env_map.items():
        val = os.environ.get(f"RCON_{env_suffix}")
        if val is not None:
            raw_data[cfg_key] = val

    if not raw_data:
        raise ConfigError("未检测到 RCON_ 前缀的环境变量")

    return create_config_from_dict(raw_data)


def parse_rcon_uri(uri: str) -> RconConfig:
    """解析 `rcon://:password@host:port` 格式的连接串。

    端口可省略 (默认 25575)，密码中的特殊字符需进行 URL 编码。

    Raises:
        ConfigError: scheme 不是 rcon、缺少主机或端口非法。
    """
    parts = urlsplit(uri)
    if parts.scheme != URI_SCHEME:
        raise ConfigError(f"URI scheme 必须为 {URI_SCHEME}: {uri!r}")

    try:
        port = parts.port
    except ValueError as e:
        raise ConfigError(f"URI 端口无效: {e}") from e

    return create_config_from_dict(
        {
            "host": parts.hostname,
            "password": unquote(parts.password or ""),
            "port": port or DEFAULT_PORT,
        }
    )

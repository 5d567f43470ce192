# File: src/rcon_core/client.py
"""
RCON 连接引擎 (Connection Engine)

职责：
1. 独占底层字节流，串行化所有帧的写入与读取。
2. 分配请求 ID，关联请求与响应。
3. 生命周期：Connect -> Authenticate -> Command... -> Close。

用法::

    with RconClient.connect("localhost", 25575, "secret") as client:
        print(client.command("list"))

由于通信两端的帧格式完全相同，也可以把 RconClient 包在服务端
accept() 得到的 socket 上，用 read() 读取客户端发来的包。
"""

import logging
import socket
import threading
from dataclasses import replace
from typing import BinaryIO

from .config import RconConfig, parse_rcon_uri
from .exceptions import AuthenticationError, InvalidResponseError
from .network import ByteStream, open_connection, wrap_stream
from .protocols import auth
from .protocols.constants import CLOSE_COMMAND, DEFAULT_PORT, Command, wrap_int32
from .protocols.packet import Packet, decode_packet, encode_packet
from .state import RconState

logger = logging.getLogger(__name__)


class RconClient:
    """单个 RCON 连接。"""

    def __init__(
        self,
        stream: "socket.socket | BinaryIO | ByteStream",
        sync_close: bool = True,
        encoding: str = "utf-8",
    ) -> None:
        """包装一个已打开的字节流。

        使用此构造函数时需自行调用 authenticate()；
        大多数场景建议使用 connect()。

        Args:
            stream: 通常是 TCP socket，也可以是任意二进制 IO 或 ByteStream。
            sync_close: close() 时是否同时关闭底层流。
            encoding: 命令与响应文本的编码。
        """
        self.stream = wrap_stream(stream)
        self.sync_close = sync_close
        self.encoding = encoding

        self._state = RconState()
        # 同一把锁保护 ID 分配、整帧写入和整帧读取，不跨连接共享
        self._lock = threading.Lock()

    # --- 构造 ---

    @classmethod
    def connect(
        cls,
        host: str,
        port: int = DEFAULT_PORT,
        password: str = "",
        timeout: float | None = None,
        encoding: str = "utf-8",
    ) -> "RconClient":
        """连接到 host:port 并使用 password 完成认证。

        Raises:
            NetworkError: 无法建立 TCP 连接。
            AuthenticationError: 握手失败或密码被拒绝 (连接会被关闭)。
        """
        sock = open_connection(host, port, timeout)
        client = cls(sock, encoding=encoding)

        try:
            authenticated = client.authenticate(password)
        except Exception:
            client.close()
            raise

        if not authenticated:
            client.close()
            raise AuthenticationError(f"认证被拒绝: {host}:{port} 密码错误")

        logger.info(f"已连接到 RCON 服务器 {host}:{port}")
        return client

    @classmethod
    def from_config(cls, config: RconConfig) -> "RconClient":
        return cls.connect(
            config.host,
            config.port,
            config.password,
            timeout=config.timeout,
            encoding=config.encoding,
        )

    @classmethod
    def from_uri(cls, uri: str, timeout: float | None = None) -> "RconClient":
        """按 `rcon://:password@host:port` 格式连接并认证。"""
        config = parse_rcon_uri(uri)
        if timeout is not None:
            config = replace(config, timeout=timeout)
        return cls.from_config(config)

    # --- 状态 ---

    @property
    def state(self) -> RconState:
        """获取当前连接状态的只读副本。"""
        return replace(self._state)

    @property
    def closed(self) -> bool:
        """close() 已被调用或底层流已关闭时返回 True。"""
        return self._state.closed or self.stream.closed

    def _next_request_id(self) -> int:
        with self._lock:
            self._state.request_id = wrap_int32(self._state.request_id + 1)
            return self._state.request_id

    # --- 收发 ---

    def send(
        self,
        command: "str | bytes | Packet",
        command_type: Command | int = Command.EXEC_COMMAND,
    ) -> int:
        """发送一个包并返回所用的请求 ID。

        Args:
            command: 命令文本、原始字节，或预先构建的 Packet。
                Packet 自带 request_id 时原样使用，否则自动分配。
            command_type: command 为文本/字节时使用的命令类型。

        Returns:
            int: 本次发送使用的请求 ID，用于关联响应。
        """
        if isinstance(command, Packet):
            packet = command
        else:
            packet = Packet.from_text(command_type, command, self.encoding)

        request_id = packet.request_id
        if request_id is None:
            request_id = self._next_request_id()

        frame = encode_packet(packet, request_id)
        with self._lock:
            self.stream.write(frame)

        logger.debug(
            f"send: id={request_id} type={packet.command_type} size={packet.size}"
        )
        return request_id

    def read(self) -> Packet | None:
        """读取一个完整帧。

        每次调用只返回一个帧，不会合并多帧响应。

        Returns:
            Packet | None: 连接已关闭 (或对端正常关闭) 时返回 None。

        Raises:
            FormatError: 帧格式错误。连接保持打开，由调用方决定是否关闭。
        """
        with self._lock:
            if self.closed:
                return None
            return decode_packet(self.stream)

    def command(self, command: str) -> str | None:
        """发送 command 并返回服务器的响应文本。

        Returns:
            str | None: 响应文本；服务器关闭连接时返回 None。

        Raises:
            InvalidResponseError: 响应的请求 ID 与请求不匹配。
        """
        request_id = self.send(command, Command.EXEC_COMMAND)

        packet = self.read()
        if packet is None:
            return None

        if packet.request_id != request_id:
            raise InvalidResponseError(
                f"invalid request id {packet.request_id} returned"
            )

        return packet.text(self.encoding)

    def authenticate(self, password: str) -> bool:
        """发送 AUTH 包完成认证握手。

        Returns:
            bool: 认证成功返回 True，密码错误返回 False。

        Raises:
            AuthenticationError: 握手过程出错。
        """
        return auth.authenticate(self, self._state, password)

    # --- 关闭 ---

    def close(self) -> None:
        """发送 `close` 命令并关闭连接。可重复调用。

        若另一线程正阻塞在 read() 中，跳过 `close` 命令直接关闭底层流，
        阻塞的 read() 随即返回 None。
        """
        if self._state.closed:
            return
        self._state.closed = True

        if self.stream.closed:
            return

        if self._lock.acquire(blocking=False):
            try:
                self._send_close_locked()
            except Exception as e:
                # 连接即将关闭，忽略发送失败
                logger.warning(f"发送 close 命令失败: {e}")
            finally:
                self._lock.release()
        else:
            logger.debug("读取进行中，跳过 close 命令")

        if self.sync_close:
            self.stream.close()
        logger.info("RCON 连接已关闭")

    def _send_close_locked(self) -> None:
        # 调用方已持有 self._lock
        self._state.request_id = wrap_int32(self._state.request_id + 1)
        packet = Packet.from_text(Command.EXEC_COMMAND, CLOSE_COMMAND, self.encoding)
        self.stream.write(encode_packet(packet, self._state.request_id))
        logger.debug(f"send: id={self._state.request_id} close")

    def __enter__(self) -> "RconClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} "
            f"closed={self.closed}, auth={self._state.auth_status.name}>"
        )

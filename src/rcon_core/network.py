# src/rcon_core/network.py
"""
RCON 核心库 - 网络模块 (Network)

把 TCP Socket 或二进制文件对象适配为统一的阻塞式字节流接口 (ByteStream)，
向连接引擎提供“读满 N 字节 / 写出全部字节 / 关闭”三种操作。
本模块不做 TLS、不设 TCP 选项，超时由 Socket 自身负责。
"""

import logging
import socket
from typing import BinaryIO, Protocol, runtime_checkable

from .exceptions import IncompleteReadError, NetworkError

logger = logging.getLogger(__name__)


@runtime_checkable
class ByteStream(Protocol):
    """连接引擎所依赖的双工字节流约定。"""

    @property
    def closed(self) -> bool: ...

    def read_exactly(self, size: int) -> bytes:
        """阻塞直到读满 size 字节。EOF 时抛出 IncompleteReadError。"""
        ...

    def write(self, data: bytes) -> None: ...

    def close(self) -> None: ...


class SocketStream:
    """基于 socket.socket 的字节流。"""

    def __init__(self, sock: socket.socket) -> None:
        self.sock = sock

    @property
    def closed(self) -> bool:
        # 已关闭的 socket 其 fileno() 为 -1
        return self.sock.fileno() == -1

    def read_exactly(self, size: int) -> bytes:
        buf = bytearray()
        while len(buf) < size:
            chunk = self.sock.recv(size - len(buf))
            if not chunk:
                raise IncompleteReadError(size, bytes(buf))
            buf += chunk
        return bytes(buf)

    def write(self, data: bytes) -> None:
        self.sock.sendall(data)

    def close(self) -> None:
        try:
            # shutdown 会唤醒其他线程中阻塞的 recv，单独 close 不会
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            logger.debug(f"Socket shutdown 失败 (对端可能已断开): {e}")
        self.sock.close()
        logger.debug("Socket 已关闭")


class FileStream:
    """基于二进制文件对象 (如 io.BytesIO、管道) 的字节流。"""

    def __init__(self, fileobj: BinaryIO) -> None:
        self.fileobj = fileobj

    @property
    def closed(self) -> bool:
        return self.fileobj.closed

    def read_exactly(self, size: int) -> bytes:
        buf = bytearray()
        while len(buf) < size:
            chunk = self.fileobj.read(size - len(buf))
            if not chunk:
                raise IncompleteReadError(size, bytes(buf))
            buf += chunk
        return bytes(buf)

    def write(self, data: bytes) -> None:
        self.fileobj.write(data)
        self.fileobj.flush()

    def close(self) -> None:
        self.fileobj.close()


def wrap_stream(obj: "socket.socket | BinaryIO | ByteStream") -> ByteStream:
    """将 socket、二进制文件对象或现成的 ByteStream 统一为 ByteStream。"""
    if isinstance(obj, socket.socket):
        return SocketStream(obj)
    if isinstance(obj, ByteStream):
        return obj
    if hasattr(obj, "read") and hasattr(obj, "write"):
        return FileStream(obj)
    raise TypeError(f"不支持的流类型: {type(obj).__name__}")


def open_connection(
    host: str, port: int, timeout: float | None = None
) -> socket.socket:
    """建立到 RCON 服务器的 TCP 连接。

    Args:
        host: 服务器地址 (域名或 IP)。
        port: 服务器端口。
        timeout: 连接及后续读写的超时秒数，None 表示一直阻塞。

    Returns:
        socket.socket: 已连接的 socket。

    Raises:
        NetworkError: 解析失败、连接被拒绝或超时。
    """
    try:
        sock = socket.create_connection((host, port), timeout=timeout)
    except OSError as e:
        raise NetworkError(f"无法连接 {host}:{port}: {e}") from e

    logger.debug(f"TCP 连接已建立: {host}:{port}")
    return sock

# File: src/rcon_core/exceptions.py
"""
RCON 核心库 - 异常体系 (Exceptions)

定义库内统一使用的异常类，以便上层应用（如 CLI）能进行精细的错误处理。
"""


class RconError(Exception):
    """RCON 核心库的所有内部异常的基类。

    上层应用可以通过捕获此异常来处理所有由 rcon-core 抛出的已知错误。
    """

    pass


class ConfigError(RconError):
    """配置加载或校验失败。

    触发场景:
    1. 缺少必要字段 (如 host/password)。
    2. 字段格式错误 (如端口越界、URI scheme 不是 rcon)。
    3. 找不到配置文件或环境变量。
    """

    pass


class NetworkError(RconError):
    """建立连接时的网络错误 (I/O 级别)。

    触发场景:
    1. DNS 解析失败。
    2. 连接被拒绝或连接超时。

    注意: 已建立连接上的读写错误 (OSError) 不会被包装，原样抛出。
    """

    pass


class IncompleteReadError(NetworkError):
    """流在读满指定字节数之前结束 (EOF)。

    Attributes:
        expected: 期望读取的字节数。
        partial: 实际读到的字节。
    """

    def __init__(self, expected: int, partial: bytes = b"") -> None:
        self.expected = expected
        self.partial = partial
        super().__init__(f"流提前结束: 期望 {expected} 字节，实际读到 {len(partial)} 字节")


class FormatError(RconError):
    """帧格式错误 (协议级别)。

    触发场景:
    1. 长度字段不在 [10, 4096] 区间内。
    2. 结尾的两个终止字节不是 0x00。

    出现此错误后，连接应视为已失步 (desynchronized)。
    """

    pass


class InvalidResponseError(RconError):
    """响应无效 (例如 request id 与请求不匹配)。"""

    pass


class AuthenticationError(RconError):
    """认证握手失败。

    触发场景:
    1. 服务器在响应前关闭了连接。
    2. 连续两次收到的都不是认证成功标记 (cause 为 InvalidResponseError)。
    3. 认证响应中的 request id 无法识别。
    4. [connect] 密码被拒绝。

    抛出此异常后，连接不可再使用。
    """

    pass

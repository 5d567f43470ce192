# File: src/rcon_core/colors.py
"""
RCON 核心库 - 颜色转换工具

将 Minecraft 聊天颜色代码 (`§` + 代码字符，UTF-8 为 0xC2 0xA7) 转换为
终端 ANSI 转义序列。仅供 CLI 输出使用，与协议本身无关。
"""

SECTION_SIGN = "§"

RESET = "\033[0m"

# 代码字符 -> ANSI 序列
COLORS = {
    "0": "\033[0;30m",  # BLACK
    "1": "\033[0;34m",  # BLUE
    "2": "\033[0;32m",  # GREEN
    "3": "\033[0;36m",  # CYAN
    "4": "\033[0;31m",  # RED
    "5": "\033[0;35m",  # PURPLE
    "6": "\033[0;33m",  # GOLD
    "7": "\033[0;37m",  # GREY
    "8": "\033[0;1;30m",  # DGREY
    "9": "\033[0;1;34m",  # LBLUE
    "a": "\033[0;1;32m",  # LGREEN
    "b": "\033[0;1;36m",  # LCYAN
    "c": "\033[0;1;31m",  # LRED
    "d": "\033[0;1;35m",  # LPURPLE
    "e": "\033[0;1;33m",  # YELLOW
    "f": "\033[0;1;37m",  # WHITE
    "n": "\033[4m",  # UNDERLINE
    "r": RESET,
}


def color(code: str) -> str:
    """返回代码字符对应的 ANSI 序列，未知代码返回空串。"""
    return COLORS.get(code, "")


def colorize(text: str) -> str:
    """把文本中的颜色代码替换为 ANSI 序列。

    每个换行前都会复位颜色，结尾同样复位，避免颜色溢出到后续输出。
    未识别的颜色代码 (如 §k 等格式代码) 会被直接丢弃。

    Args:
        text: 服务器返回的原始响应文本。

    Returns:
        str: 适合直接打印到终端的文本。
    """
    out = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\n":
            out.append(RESET)
            out.append(ch)
        elif ch == SECTION_SIGN and i + 1 < len(text):
            out.append(color(text[i + 1]))
            i += 1
        else:
            out.append(ch)
        i += 1
    out.append(RESET)
    return "".join(out)


def strip_colors(text: str) -> str:
    """移除文本中的所有颜色代码 (用于 --no-color 输出)。"""
    out = []
    i = 0
    while i < len(text):
        if text[i] == SECTION_SIGN and i + 1 < len(text):
            i += 2
            continue
        out.append(text[i])
        i += 1
    return "".join(out)

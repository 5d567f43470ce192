# File: src/rcon_core/cli.py
"""
RCON 命令行前端

示例::

    rcon-core --uri rcon://:secret@localhost:25575 "say hello" list
    rcon-core --config config.toml --profile survival list
    rcon-core --env-file .env list
"""

import argparse
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from . import __version__
from .client import RconClient
from .colors import colorize, strip_colors
from .config import (
    RconConfig,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
    parse_rcon_uri,
)
from .exceptions import ConfigError, RconError

logger = logging.getLogger("rcon_core.cli")

EXIT_ERROR = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="rcon-core", description="Send commands to a server over RCON."
    )
    p.add_argument("commands", nargs="+", metavar="COMMAND")

    source = p.add_mutually_exclusive_group()
    source.add_argument("--uri", help="rcon://:password@host:port")
    source.add_argument("--config", type=Path, help="TOML config file")
    source.add_argument(
        "--env", action="store_true", help="read RCON_* environment variables"
    )
    source.add_argument("--host")

    p.add_argument("--env-file", type=Path, help=".env file loaded before --env")
    p.add_argument("--profile", default="default")
    p.add_argument("--port", type=int)
    p.add_argument("--password")
    p.add_argument("--timeout", type=float)
    p.add_argument("--no-color", action="store_true")
    p.add_argument("--debug", action="store_true")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def resolve_config(args: argparse.Namespace) -> RconConfig:
    """按命令行参数选择配置来源，--port / --password / --timeout 覆盖其结果。"""
    overrides = {
        k: v
        for k, v in (
            ("password", args.password),
            ("port", args.port),
            ("timeout", args.timeout),
        )
        if v is not None
    }

    if args.uri:
        config = parse_rcon_uri(args.uri)
    elif args.config:
        config = load_config_from_toml(args.config, args.profile)
    elif args.env or args.env_file:
        config = load_config_from_env(args.env_file)
    else:
        return create_config_from_dict({"host": args.host, **overrides})

    if overrides:
        config = create_config_from_dict({**asdict(config), **overrides})
    return config


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.env_file and (args.uri or args.config or args.host):
        parser.error("--env-file 不能与 --uri / --config / --host 同时使用")

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s - %(name)s - [%(levelname)s] - %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = resolve_config(args)
    except ConfigError as e:
        print(f"配置错误: {e}", file=sys.stderr)
        return EXIT_CONFIG

    logger.debug(f"配置加载完成: {config!r}")
    render = strip_colors if args.no_color else colorize

    try:
        with RconClient.from_config(config) as client:
            for command in args.commands:
                print(f"> {command}")
                response = client.command(command)
                if response is None:
                    print("Server closed connection", file=sys.stderr)
                    return EXIT_ERROR
                print(render(response))
    except (RconError, OSError) as e:
        print(f"错误: {e}", file=sys.stderr)
        return EXIT_ERROR

    return 0


if __name__ == "__main__":
    sys.exit(main())

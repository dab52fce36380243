"""CLI entry point for linebot-client."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

import httpx

from linebot_client.api.call import Call
from linebot_client.api.context import CallContext
from linebot_client.api.errors import APIError, ContextError, DecodeError
from linebot_client.client import LineBotClient
from linebot_client.config import AppConfig, load_config
from linebot_client.log import setup_logging
from linebot_client.messenger.models import ImageMessage, Message, StickerMessage, TextMessage


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-c", "--config", default="config.yaml", help="Path to config file")
    parser.add_argument("-e", "--env", default=".env", help="Path to .env file")
    parser.add_argument(
        "--timeout", type=float, default=None, help="Give up after this many seconds"
    )


def _add_message_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--text", action="append", default=[], help="Text message (repeatable)")
    parser.add_argument(
        "--image",
        nargs=2,
        action="append",
        default=[],
        metavar=("ORIGINAL_URL", "PREVIEW_URL"),
        help="Image message (repeatable)",
    )
    parser.add_argument(
        "--sticker",
        nargs=2,
        action="append",
        default=[],
        metavar=("PACKAGE_ID", "STICKER_ID"),
        help="Sticker message (repeatable)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linebot-client",
        description="Send messages and fetch data through the LINE Messaging API",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    check_parser = subparsers.add_parser("config-check", help="Validate configuration")
    _add_common_args(check_parser)

    push_parser = subparsers.add_parser("push", help="Push messages to a user, group or room")
    _add_common_args(push_parser)
    push_parser.add_argument("--to", required=True, help="Target user, group or room ID")
    _add_message_args(push_parser)

    reply_parser = subparsers.add_parser("reply", help="Reply to a webhook event")
    _add_common_args(reply_parser)
    reply_parser.add_argument("--token", required=True, help="Reply token from the event")
    _add_message_args(reply_parser)

    profile_parser = subparsers.add_parser("profile", help="Show a user's profile")
    _add_common_args(profile_parser)
    profile_parser.add_argument("user_id")

    content_parser = subparsers.add_parser("content", help="Download message content")
    _add_common_args(content_parser)
    content_parser.add_argument("message_id")
    content_parser.add_argument(
        "-o", "--output", default=None, help="Output path (default: file name from the API)"
    )

    return parser


def collect_messages(args: argparse.Namespace) -> list[Message]:
    """Messages in command-line group order: texts, then images, then stickers."""
    messages: list[Message] = [TextMessage(text) for text in args.text]
    messages += [ImageMessage(original, preview) for original, preview in args.image]
    messages += [StickerMessage(package, sticker) for package, sticker in args.sticker]
    return messages


def main(argv: Optional[list[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config, args.env)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Copy config.example.yaml to config.yaml and fill in the channel credentials")
        sys.exit(1)
    except Exception as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.command == "config-check":
        _check_config(args.config, config)
        return

    setup_logging(config.logging.level, config.logging.format)

    if args.command in ("push", "reply"):
        if not collect_messages(args):
            print("Error: at least one --text, --image or --sticker is required", file=sys.stderr)
            sys.exit(2)

    handlers: dict[str, Callable[[LineBotClient, argparse.Namespace], Awaitable[None]]] = {
        "push": _push,
        "reply": _reply,
        "profile": _profile,
        "content": _content,
    }
    sys.exit(asyncio.run(_run(config, args, handlers[args.command])))


def _check_config(config_path: str, config: AppConfig) -> None:
    """Print a configuration summary without touching the network."""
    print(f"Configuration valid: {config_path}")
    print(f"  API endpoint      : {config.line.endpoint_base}")
    print(f"  Data API endpoint : {config.line.endpoint_base_data}")
    print(f"  Timeout           : {config.line.timeout}s")
    print(f"  Access token      : {'set' if config.line.channel_access_token else 'MISSING'}")
    print(f"  Channel secret    : {'set' if config.line.channel_secret else 'MISSING'}")
    print(f"  Log level         : {config.logging.level} ({config.logging.format})")


async def _run(
    config: AppConfig,
    args: argparse.Namespace,
    handler: Callable[[LineBotClient, argparse.Namespace], Awaitable[None]],
) -> int:
    try:
        async with LineBotClient.from_config(config.line) as client:
            await handler(client, args)
    except APIError as e:
        print(f"Error: {e}", file=sys.stderr)
        if e.response is not None:
            for detail in e.response.details:
                print(f"  {detail.property}: {detail.message}", file=sys.stderr)
        return 1
    except (DecodeError, ContextError, httpx.TransportError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    return 0


async def _execute(call: Call[Any], args: argparse.Namespace) -> Any:
    if args.timeout is not None:
        call = call.with_context(CallContext.with_timeout(args.timeout))
    return await call.execute()


async def _push(client: LineBotClient, args: argparse.Namespace) -> None:
    res = await _execute(client.push_message(args.to, *collect_messages(args)), args)
    print(f"Sent (request id: {res.request_id or '-'})")


async def _reply(client: LineBotClient, args: argparse.Namespace) -> None:
    res = await _execute(client.reply_message(args.token, *collect_messages(args)), args)
    print(f"Replied (request id: {res.request_id or '-'})")


async def _profile(client: LineBotClient, args: argparse.Namespace) -> None:
    profile = await _execute(client.get_profile(args.user_id), args)
    print(f"User ID        : {profile.user_id}")
    print(f"Display name   : {profile.display_name}")
    print(f"Picture URL    : {profile.picture_url or '(none)'}")
    print(f"Status message : {profile.status_message or '(none)'}")


def _output_path(args: argparse.Namespace, file_name: str) -> Path:
    if args.output:
        return Path(args.output)
    # Never let the server-supplied name pick a directory
    name = Path(file_name.replace("\\", "/")).name
    if name in ("", ".", ".."):
        name = f"{args.message_id}.bin"
    return Path(name)


async def _content(client: LineBotClient, args: argparse.Namespace) -> None:
    content = await _execute(client.get_message_content(args.message_id), args)
    async with content:
        output = _output_path(args, content.file_name)
        size = 0
        with output.open("wb") as f:
            async for chunk in content.aiter_bytes():
                f.write(chunk)
                size += len(chunk)
    print(f"Saved {size} bytes to {output}")


if __name__ == "__main__":
    main()

"""Command line entry point: send one prompt and print the reply."""

import argparse
import sys
from typing import List, Optional

import httpx

from .clients.chat import ChatClient
from .config import get_settings
from .errors import OpenAIChatError
from .models.chat import ChatCompletionRequest, ChatMessage, ChatMessageRole
from .utils import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="openai-chat", description="Send a prompt to a chat completion endpoint")
    parser.add_argument("prompt", help="User message to send")
    parser.add_argument("-m", "--model", help="Model name (defaults to OPENAI_CHAT_DEFAULT_MODEL)")
    parser.add_argument("-s", "--system", help="Optional system message")
    parser.add_argument("--max-tokens", type=int, default=None)
    parser.add_argument("--temperature", type=float, default=None)
    grp = parser.add_mutually_exclusive_group()
    grp.add_argument("--stream", dest="stream", action="store_true", default=True, help="Stream the reply (default)")
    grp.add_argument("--no-stream", dest="stream", action="store_false", help="Wait for the full reply")
    return parser


def build_request(args: argparse.Namespace, default_model: str) -> ChatCompletionRequest:
    messages = []
    if args.system:
        messages.append(ChatMessage(role=ChatMessageRole.SYSTEM, content=args.system))
    messages.append(ChatMessage(role=ChatMessageRole.USER, content=args.prompt))
    return ChatCompletionRequest(
        model=args.model or default_model,
        messages=messages,
        max_tokens=args.max_tokens,
        temperature=args.temperature,
    )


def run(args: argparse.Namespace, client: ChatClient, default_model: str) -> None:
    request = build_request(args, default_model)
    if not args.stream:
        response = client.create_chat_completion(request)
        for choice in response.choices:
            print(choice.message.content)
        return

    with client.create_chat_completion_stream(request) as stream:
        for event in stream:
            for choice in event.choices:
                if choice.delta.content:
                    print(choice.delta.content, end="", flush=True)
    print()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)

    try:
        with ChatClient.from_settings(settings) as client:
            run(args, client, settings.default_model)
    except (OpenAIChatError, httpx.HTTPError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

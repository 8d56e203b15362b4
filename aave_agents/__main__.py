"""
Interactive Aave chat.

Usage:
    python -m aave_agents [--simulate] [--model gemini-2.5-flash] [--large-model gemini-2.5-pro] [--log-level DEBUG]
"""

import argparse
import asyncio
import sys
from datetime import datetime

from pydantic import ValidationError

from aave_agents.config import Settings
from aave_agents.errors import AaveError
from aave_agents.infrastructure.logging import setup_logging
from aave_agents.models.chat_message import ActionResult, ChatMessage
from aave_agents.plugin import build_plugin
from aave_agents.runtime import AgentRuntime

USER_ID = "cli"


class Colors:
    BLUE = "\033[94m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    END = "\033[0m"


def new_conversation_id() -> str:
    return f"cli-session-{datetime.now().strftime('%Y%m%d-%H%M%S')}"


def print_header(settings: Settings, conversation_id: str, simulated: bool):
    mode = "simulation" if simulated else "on-chain"
    print(f"\n{Colors.CYAN}{Colors.BOLD}╔══════════════════════════════════════════════════════════╗{Colors.END}")
    print(f"{Colors.CYAN}{Colors.BOLD}║                 AAVE V3 AGENT - CHAT                     ║{Colors.END}")
    print(f"{Colors.CYAN}{Colors.BOLD}╚══════════════════════════════════════════════════════════╝{Colors.END}")
    print(f"{Colors.YELLOW}Network: {settings.aave_network} ({mode}) | Models: {settings.small_model} / {settings.large_model}{Colors.END}")
    print(f"{Colors.YELLOW}Session: {conversation_id}{Colors.END}")
    print(f"{Colors.YELLOW}Commands: 'exit' or 'quit' to leave | 'clear' for a new session{Colors.END}")
    print()


def print_result(result: ActionResult):
    color = Colors.GREEN if result.success else Colors.RED
    print(f"{color}Aave [{result.action}]:{Colors.END} {result.text}")
    print()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Chat with the Aave V3 agent")
    parser.add_argument("--simulate", action="store_true", help="Use the in-memory Aave simulation")
    parser.add_argument("--model", default=None, help="Model for parameter extraction (both tiers)")
    parser.add_argument("--large-model", default=None, help="Model for the large tier (flash loans)")
    parser.add_argument("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING)")
    return parser.parse_args(argv)


async def repl(settings: Settings):
    plugin = build_plugin(settings)
    runtime = AgentRuntime(settings=settings)
    plugin.install(runtime)

    conversation_id = new_conversation_id()
    print_header(settings, conversation_id, simulated=not settings.can_sign or settings.aave_simulation)
    print(f"{Colors.CYAN}{'─' * 60}{Colors.END}\n")

    while True:
        try:
            user_input = input(f"{Colors.BLUE}You:{Colors.END} ").strip()
        except KeyboardInterrupt:
            print(f"\n\n{Colors.YELLOW}Interrupted. Bye!{Colors.END}")
            break
        except EOFError:
            break

        if not user_input:
            continue
        command = user_input.lower()
        if command in ("exit", "quit"):
            print(f"\n{Colors.YELLOW}Bye!{Colors.END}")
            break
        if command == "clear":
            conversation_id = new_conversation_id()
            print(f"{Colors.YELLOW}New session: {conversation_id}{Colors.END}\n")
            continue

        message = ChatMessage(content=user_input, user_id=USER_ID, conversation_id=conversation_id)
        result = await plugin.dispatch(runtime, message, callback=print_result)
        if result is None:
            print(
                f"{Colors.YELLOW}I can supply, withdraw, borrow, repay, switch rates, manage collateral, "
                f"toggle eMode and run flash loans on Aave V3.{Colors.END}\n"
            )


def settings_overrides(args: argparse.Namespace) -> dict:
    overrides = {}
    if args.simulate:
        overrides["aave_simulation"] = True
    if args.model:
        overrides["small_model"] = args.model
        overrides["large_model"] = args.model
    if args.large_model:
        overrides["large_model"] = args.large_model
    if args.log_level:
        overrides["log_level"] = args.log_level
    return overrides


def main(argv=None) -> int:
    overrides = settings_overrides(parse_args(argv))

    try:
        settings = Settings.from_env(**overrides)
    except ValidationError as e:
        print(f"{Colors.RED}[ERROR] Invalid configuration:{Colors.END}\n{e}")
        return 1

    setup_logging(settings.log_level, settings.log_format)
    try:
        asyncio.run(repl(settings))
    except AaveError as e:
        print(f"{Colors.RED}[ERROR] {e.message}{Colors.END}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

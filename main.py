#!/usr/bin/env python3
"""
Foisit - Command Resolution Console
===================================

Interactive text console for the command handler.

Usage:
    python main.py                     # Demo commands, smart intent from config
    python main.py --config my.yaml    # Commands and resolver from a config file
    python main.py --no-smart-intent   # Exact trigger phrases only
    python main.py --help              # Show help
"""

import argparse
import asyncio
import base64
import logging
import mimetypes
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import FloatPrompt, Prompt
from rich.table import Table
from rich.text import Text

from commands.models import (
    Command,
    FileDelivery,
    FileParameter,
    InteractiveResponse,
    NumberParameter,
    Parameter,
    ResponseType,
    SelectParameter,
)
from core.command_handler import CommandHandler
from core.confirmation import confirmed_from_option
from core.errors import CommandActionError
from infra.config import load_config
from infra.logging import configure_logging


console = Console()


# -- Demo commands -----------------------------------------------------------

def book_appointment(params: Dict[str, Any]) -> str:
    return f"Booked {params['service']} on {params['date']}."


def create_user(params: Dict[str, Any]) -> str:
    return f"Created user {params['fullName']} (age {params['age']:g})."


async def transfer_money(params: Dict[str, Any]) -> str:
    await asyncio.sleep(0.2)
    if params["amount"] > 10_000:
        raise CommandActionError("Transfers above 10000 need a branch visit.")
    return f"Sent {params['amount']:.2f} to {params['toAccount']}."


def set_theme(params: Dict[str, Any]) -> str:
    return f"Theme switched to {params['theme']}."


DEMO_COMMANDS = [
    {
        "id": "book_appointment",
        "command": "book appointment",
        "description": "Book a service appointment",
        "keywords": ["appointment", "schedule"],
        "action": book_appointment,
        "parameters": [
            {"name": "service", "type": "string", "required": True, "description": "the service"},
            {"name": "date", "type": "date", "required": True, "description": "the date (YYYY-MM-DD)"},
        ],
    },
    {
        "id": "create_user",
        "command": "create user",
        "description": "Create a new user account",
        "action": create_user,
        "parameters": [
            {"name": "fullName", "type": "string", "required": True, "description": "the full name"},
            {"name": "age", "type": "number", "required": True, "min": 0, "max": 150},
        ],
    },
    {
        "id": "transfer_money",
        "command": "transfer money",
        "description": "Transfer money to another account",
        "critical": True,
        "action": transfer_money,
        "parameters": [
            {"name": "amount", "type": "number", "required": True, "min": 1},
            {"name": "toAccount", "type": "string", "required": True, "description": "the target account"},
        ],
    },
    {
        "id": "set_theme",
        "command": "set theme",
        "description": "Change the color theme",
        "keywords": ["theme", "dark mode"],
        "action": set_theme,
        "parameters": [
            {
                "name": "theme",
                "type": "select",
                "required": True,
                "options": [
                    {"label": "Light", "value": "light"},
                    {"label": "Dark", "value": "dark"},
                ],
            },
        ],
    },
]


# -- Rendering ---------------------------------------------------------------

def print_banner(handler: CommandHandler) -> None:
    """Print the welcome banner."""
    banner = Text()
    banner.append("Foisit", style="bold cyan")
    banner.append(" - Command Resolution Console\n", style="dim")
    if handler.enable_smart_intent:
        banner.append("Smart intent: on\n\n", style="green")
    else:
        banner.append("Smart intent: off\n\n", style="yellow")
    banner.append("Type ", style="dim")
    banner.append("help", style="bold green")
    banner.append(" for commands | ", style="dim")
    banner.append("quit", style="bold red")
    banner.append(" to exit", style="dim")

    console.print(Panel(banner, title="Welcome", border_style="blue"))


def print_commands(handler: CommandHandler) -> None:
    table = Table(title="Registered commands")
    table.add_column("Trigger", style="cyan")
    table.add_column("Id", style="dim")
    table.add_column("Parameters")
    table.add_column("Critical", justify="center")

    for command in handler.list_commands():
        params = ", ".join(
            f"{p.name}{'*' if p.required else ''}:{p.type.value}" for p in command.parameters
        )
        table.add_row(command.command, command.id, params or "-", "yes" if command.critical else "")

    console.print(table)


def print_response(response: InteractiveResponse) -> None:
    if response.type == ResponseType.SUCCESS:
        console.print(f"[bold green]Done:[/bold green] {response.message or 'OK'}")
    elif response.type == ResponseType.ERROR:
        console.print(f"[bold red]Error:[/bold red] {response.message}")
    else:
        console.print(f"[bold yellow]{response.message}[/bold yellow]")


# -- Follow-up turns ---------------------------------------------------------

def _file_value(param: FileParameter, raw: str) -> Any:
    path = Path(raw).expanduser()
    if FileDelivery(param.delivery) == FileDelivery.FILE:
        return path
    if not path.is_file():
        return raw
    mime = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return f"data:{mime};base64,{base64.b64encode(path.read_bytes()).decode('ascii')}"


def ask_field(param: Parameter) -> Any:
    """Prompt for one form field and return the value as the validator expects it."""
    label = param.description or param.name

    if isinstance(param, NumberParameter):
        return FloatPrompt.ask(f"[cyan]{label}[/cyan]", console=console)
    if isinstance(param, SelectParameter) and param.options:
        return Prompt.ask(f"[cyan]{label}[/cyan]", choices=param.option_values, console=console)
    if isinstance(param, FileParameter):
        return _file_value(param, Prompt.ask(f"[cyan]{label}[/cyan] (path)", console=console))
    return Prompt.ask(f"[cyan]{label}[/cyan]", default="", show_default=False, console=console)


def next_input(response: InteractiveResponse) -> Optional[Dict[str, Any]]:
    """Collect the user's answer to a form/confirm/ambiguous response."""
    if response.type == ResponseType.FORM:
        params = dict(response.params or {})
        for param in response.fields:
            params[param.name] = ask_field(param)
        return {"commandId": response.command_id, "params": params}

    if response.type in (ResponseType.CONFIRM, ResponseType.AMBIGUOUS):
        choices = {str(i): option for i, option in enumerate(response.options, start=1)}
        for key, option in choices.items():
            console.print(f"  [bold]{key}[/bold]. {option.label}")
        picked = choices[Prompt.ask("Choose", choices=list(choices), console=console)]

        payload: Dict[str, Any] = {"commandId": picked.command_id, "params": dict(picked.params or {})}
        confirmed = confirmed_from_option(picked.value)
        if confirmed is not None:
            payload["confirmed"] = confirmed
        return payload

    return None


async def run_turn(handler: CommandHandler, text: str) -> None:
    """Resolve one input, following up until the dialog ends."""
    response = await handler.execute_command(text)
    print_response(response)

    while True:
        follow_up = next_input(response)
        if follow_up is None:
            return
        response = await handler.execute_command(follow_up)
        print_response(response)


def run_console(handler: CommandHandler) -> None:
    print_banner(handler)

    while True:
        try:
            text = console.input("\n[bold cyan]>[/bold cyan] ").strip()

            if not text:
                continue

            if text.lower() in ("quit", "exit", "q"):
                break

            if text.lower() in ("help", "commands"):
                print_commands(handler)
                continue

            if text.lower() == "intent":
                handler.enable_smart_intent = not handler.enable_smart_intent
                state = "on" if handler.enable_smart_intent else "off"
                console.print(f"[green]Smart intent {state}[/green]")
                continue

            asyncio.run(run_turn(handler, text))

        except KeyboardInterrupt:
            break
        except EOFError:
            break

    console.print("\n[yellow]Bye.[/yellow]")


def build_handler(args: argparse.Namespace) -> CommandHandler:
    config = load_config(args.config)
    if args.log_level:
        config.log_level = args.log_level
    if args.no_smart_intent:
        config.enable_smart_intent = False

    configure_logging(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        log_dir=config.log_dir,
        file=config.log_dir is not None,
    )

    handler = CommandHandler.from_config(config)
    if not config.commands_path:
        for definition in DEMO_COMMANDS:
            handler.add_command(Command(**definition))
    return handler


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Foisit - Command Resolution Console"
    )
    parser.add_argument(
        "--config", "-c",
        default="config.yaml",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--no-smart-intent",
        action="store_true",
        help="Match exact trigger phrases only"
    )
    parser.add_argument(
        "--log-level", "-l",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )

    args = parser.parse_args()
    handler = build_handler(args)
    run_console(handler)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

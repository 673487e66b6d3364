#!/usr/bin/env python3
"""
Foisit Service Bus Server
-------------------------
Runs the FastAPI service bus with a command handler.

Usage:
    python -m infra.server --port 8000
    python -m infra.server --config config.yaml --no-smart-intent
"""

import argparse
import logging

import uvicorn
from rich.console import Console

from core.command_handler import CommandHandler
from infra.config import load_config
from infra.logging import configure_logging
from infra.service_bus import ServiceBus

console = Console()


def main():
    parser = argparse.ArgumentParser(description="Foisit Service Bus Server")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--config", default="config.yaml", help="Path to the YAML config file")
    parser.add_argument("--no-smart-intent", action="store_true", help="Disable the smart-intent resolver")
    parser.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    args = parser.parse_args()

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

    console.print("[dim]Loading commands...[/dim]")
    handler = CommandHandler.from_config(config)

    bus = ServiceBus(handler)
    app = bus.create_app()

    console.print("\n[bold green]Foisit Service Bus[/bold green]")
    console.print(f"Commands: {len(handler.get_commands())} | "
                  f"Smart intent: {'on' if handler.enable_smart_intent else 'off'}")
    console.print(f"Running on http://{args.host}:{args.port}")
    console.print(f"API docs: http://{args.host}:{args.port}/docs")
    console.print("[dim]Press Ctrl+C to stop[/dim]\n")

    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        log_level=config.log_level.lower()
    )


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Composition root for the dataset catalog API.

``python main.py <subcommand>`` runs the CLI. ``create_app_from_env`` wires the
application from the environment for ASGI servers started directly, e.g.
``uvicorn main:create_app_from_env --factory``.
"""

import sys

from fastapi import FastAPI

from adapters.http_api import build_app
from adapters.main_cli import main as unified_main
from infrastructure.config import Config


def create_app_from_env() -> FastAPI:
    """ASGI factory: build the application from environment configuration."""
    return build_app(Config.from_env())


def main() -> None:
    """Main entry point for the CLI."""
    sys.exit(unified_main())


if __name__ == "__main__":
    main()

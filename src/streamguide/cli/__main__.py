#!/usr/bin/env python3
"""
CLI entry point for streamguide.cli module.

This allows running: python -m streamguide.cli
"""

from .main import cli

if __name__ == "__main__":
    cli()

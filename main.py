#!/usr/bin/env python3
"""Run the optimizer from the repository root: ``python main.py --config config.yaml``."""

from taskanneal.main import cli

if __name__ == "__main__":
    cli()

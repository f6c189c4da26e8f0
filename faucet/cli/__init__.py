"""
faucet.cli - the `faucet` command (typer).

- main:     the typer app (`simulate`, `limits`)
- scenario: scenario loading and execution against in-memory adapters
"""

from .main import app

__all__ = ["app"]

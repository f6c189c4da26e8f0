"""
Faucet execution core - cooldown-gated token distribution with owner-managed
parameters, chain gating and delegated vesting claims.

This package exposes only lightweight metadata at import time. The runtime
(`faucet.runtime.faucet.Faucet`) and the in-memory adapters should be imported
explicitly from their subpackages.
"""

try:
    from .version import __version__, git_describe  # type: ignore
except Exception:  # pragma: no cover - fallback for fresh checkouts
    __version__ = "0.0.0+local"

    def git_describe() -> str:
        """Return a best-effort version string when VCS metadata isn't available."""
        return __version__

__all__ = ["__version__", "git_describe"]

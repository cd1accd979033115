"""
Mollie CLI - Three-layer architecture for the Mollie payments API.

Layers:
- core: Raw types and HTTP client
- sdk: High-level MollieClient with one service per resource
- cli: Command-line interface
"""

from mollie_cli.sdk import MollieClient

__version__ = "0.1.0"
__all__ = ["MollieClient"]

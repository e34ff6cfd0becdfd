"""
tmmnt package
- Mount a network Time Machine share, attach its sparse bundle and expose every backup snapshot read-only.
"""
__all__ = ["cli", "config", "orchestrator", "preflight", "query", "mounter", "util", "types"]
__version__ = "0.1.0"

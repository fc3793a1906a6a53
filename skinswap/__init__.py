"""
skinswap: suffix-based resource overrides for skin/theme asset variants.

The platform core (container, hooks, plugin loader) lives here; the
override behavior itself is provided by the plugins under `plugins/`.
"""
__version__ = "0.3.0"

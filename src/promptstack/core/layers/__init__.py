"""Layer stack resolution.

Configuration directories are listed closest (highest precedence) first.
Each entry may use ``~`` and environment variables; relative entries are
resolved against the repository root.
"""

from .stack import LayerSpec, LayerStack, resolve_config_dirs

__all__ = ["LayerSpec", "LayerStack", "resolve_config_dirs"]

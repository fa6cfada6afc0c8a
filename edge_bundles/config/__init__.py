"""Load and validate edge bundle build configuration.

Projects may carry an ``edge-bundles.yaml`` beside their framework config.
:func:`resolve_build_config` reads it when present, applies defaults, and
returns a :class:`BuildConfig` ready for :class:`~edge_bundles.builder.Builder`.

Examples
--------
>>> from pathlib import Path
>>> from edge_bundles.config import resolve_build_config
>>> config = resolve_build_config(Path("my-app"))  # doctest: +SKIP
>>> config.framework_dir  # doctest: +SKIP
PosixPath('my-app/.next')
"""

from .loader import CONFIG_FILENAME, load_build_config, resolve_build_config
from .models import DEFAULT_FRAMEWORK_DIR, DEFAULT_OUTPUT_DIR, BuildConfig

__all__ = [
    "BuildConfig",
    "CONFIG_FILENAME",
    "DEFAULT_FRAMEWORK_DIR",
    "DEFAULT_OUTPUT_DIR",
    "load_build_config",
    "resolve_build_config",
]

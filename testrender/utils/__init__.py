"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Value comparison and context masking (compare)
    - Atomic YAML I/O (fs)
    - Config and snapshot schemas (validators)
    - YAML golden snapshots (snapshots)
    - Unified logging (logging_config)

No module in utils/ may import from upper layers (core, reconciler, etc.).

Convenience imports:
    from testrender.utils import fs, validators
    from testrender.utils.logging_config import setup_logging, get_logger
"""

from . import compare
from . import fs
from . import logging_config
from . import snapshots
from . import validators

from .logging_config import get_logger, push_context, setup_logging

__all__ = [
    # Modules
    'compare',
    'fs',
    'logging_config',
    'snapshots',
    'validators',
    # Functions
    'get_logger',
    'push_context',
    'setup_logging',
]

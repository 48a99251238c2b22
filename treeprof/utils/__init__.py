"""
Utility modules for treeprof.
"""

from .cli_common import setup_logging, BaseArgumentParser, validate_common_arguments, configure_logging_level

__all__ = [
    'setup_logging', 'BaseArgumentParser', 'validate_common_arguments', 'configure_logging_level'
]

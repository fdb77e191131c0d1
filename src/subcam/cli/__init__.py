"""Command-line interface modules for SUBCAM conversion.

This package contains core execution logic, making scripts/ optional and deletable.
The runner itself lives in ``subcam.cli.run_conversion``.
"""

from subcam.cli.run_conversion import main, setup_logging, load_user_config_dict

__all__ = ['main', 'setup_logging', 'load_user_config_dict']

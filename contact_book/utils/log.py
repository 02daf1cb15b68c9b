"""
Logging setup shared by the interactive shell and the action scripts.

Library modules only create module-level loggers; entry points call
`configure_logging` once before doing any work.
"""

import logging

LOG_FORMAT = "%(levelname)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """
    Configure root logging on stderr.

    Args:
        verbose: If True, log at DEBUG level; otherwise WARNING.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )

"""
Logging Setup

One stderr handler on the grocery_catalog package logger. The CLI prints
the product table on stdout, so diagnostics never interleave with it.
"""

import logging
import sys

LOG_FORMAT = "%(levelname)-8s %(name)s: %(message)s"


def setup_logging(verbose: bool = False, quiet: bool = False, logger_name: str = "grocery_catalog") -> logging.Logger:
    """
    Route catalog log records to stderr at the chosen verbosity.

    Calling it again replaces the handler rather than adding a second one.

    Args:
        verbose: Show DEBUG records (unchanged filter pairs, stale results, skipped documents)
        quiet: Only show warnings and errors, e.g. failed fetches
        logger_name: Package logger that receives the handler

    Returns:
        The package logger
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)

    # Replace, never stack, handlers on repeated setup
    logger.handlers.clear()
    logger.addHandler(handler)
    return logger

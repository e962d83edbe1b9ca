from __future__ import annotations

import logging
import sys

LOG_FORMAT = "CodeSentinel: %(message)s"
VERBOSE_LOG_FORMAT = "CodeSentinel [%(levelname)s] %(name)s: %(message)s"


def log_level(*, verbose: bool, quiet: bool) -> int:
    """DEBUG with --verbose, WARNING with --quiet, INFO otherwise."""

    if verbose:
        return logging.DEBUG
    return logging.WARNING if quiet else logging.INFO


def configure_logging(*, verbose: bool, quiet: bool) -> None:
    """
    Route `codesentinel.*` loggers to stderr for one CLI invocation.

    stdout is reserved for reports (JSON must stay parseable). Calling this
    again replaces the previous handlers.
    """

    logging.basicConfig(
        level=log_level(verbose=verbose, quiet=quiet),
        format=VERBOSE_LOG_FORMAT if verbose else LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )

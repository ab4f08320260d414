"""Logging helpers for s3verify."""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(verbose: bool = False) -> None:
    """Configure default logging if no handlers are present.

    Check progress goes through the reporters; logging carries diagnostics
    only, so the default level is WARNING and ``--verbose`` drops to DEBUG.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=[logging.StreamHandler()],
    )

    # botocore's DEBUG output includes signed headers; keep it to --verbose.
    logging.getLogger("botocore").setLevel(logging.DEBUG if verbose else logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.INFO if verbose else logging.WARNING)

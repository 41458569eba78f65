"""
--------------------------------------------------------------------------------
AUTHOR:         Nishar A Sunkesala / FixMyK8s
DATE:           2026-10-17
PURPOSE:        Shared logger for IconGuard. One stdout handler, message-only
                output so engine status lines read like the CLI's own prints.
--------------------------------------------------------------------------------
"""
import logging
import os
import sys

LOGGER_NAME = "iconguard"


def get_logger(name=None):
    """Returns the package logger (or a child of it), configured once."""
    root = logging.getLogger(LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
        level = os.environ.get("ICONGUARD_LOG_LEVEL", "INFO").upper()
        root.setLevel(getattr(logging, level, logging.INFO))
        root.propagate = False

    if name and name != LOGGER_NAME:
        return root.getChild(name.rsplit(".", 1)[-1])
    return root

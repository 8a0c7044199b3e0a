"""
Pennant package logger.

Internal tracing only (token expansion, dispatch decisions, child selection), all at
DEBUG level. The library never attaches handlers; hosts opt in with, e.g.:

    logging.basicConfig(level=logging.DEBUG)
"""
import logging

logger = logging.getLogger("pennant")

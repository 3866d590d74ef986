"""
autoinst - answer acquisition and validation for unattended installations.

Retrieves the answer file describing how to set up a host, validates it into
a consistent configuration and projects it onto the record consumed by the
low-level installer.
"""

__version__ = "1.0.0"
__author__ = "autoinst developers"

# Re-export key components for easier access
from autoinst.models.answer import Answer, parse_answer
from autoinst.models.fetch import AutoInstSettings, FetchMode
from autoinst.fetch.orchestrator import fetch_answer

__all__ = [
    "Answer",
    "AutoInstSettings",
    "FetchMode",
    "fetch_answer",
    "parse_answer",
]

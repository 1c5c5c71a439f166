"""
Shared utilities for gnuplatex.

Common functionality used across contexts:
- Logger setup
- External process execution
- PDF inspection
"""

from gnuplatex.utils.pdf_processing import page_count
from gnuplatex.utils.process_runner import ProcessResult, ProcessRunner

__all__ = ["page_count", "ProcessResult", "ProcessRunner"]

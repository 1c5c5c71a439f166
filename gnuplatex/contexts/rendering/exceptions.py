"""Custom exceptions for the rendering context."""

from typing import Iterable, Optional


class RenderingError(Exception):
    """Base class for run-fatal post-build failures."""


class DuplicateTargetError(RenderingError, ValueError):
    """
    Raised when a script declares the same output target more than once.

    Two targets with one name would write the same PNG and rewrite the same
    include file, so the run is rejected before anything is written.

    Attributes:
        duplicates: Target names that appear more than once, in first-seen order
    """

    def __init__(self, duplicates: Iterable[str]):
        self.duplicates = list(duplicates)
        super().__init__(
            f"Output targets declared more than once: {', '.join(self.duplicates)}"
        )


class CompilationError(RenderingError):
    """
    Raised when the document compiler fails on the wrapper document.

    Attributes:
        message: Error description
        result: CompilationResult with parsed errors and raw output
    """

    def __init__(self, message: str, result: Optional[object] = None):
        self.message = message
        self.result = result

        parts = [message]
        errors = getattr(result, "errors", None)
        if errors:
            parts.append(f"First error: {errors[0]}")

        super().__init__("\n".join(parts))

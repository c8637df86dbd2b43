"""
Custom exceptions and error handling for the deal extraction engine.

Provides:
- Typed exception hierarchy for per-boundary extraction failures
- Error context preservation for debugging
- Partial success handling for per-boundary extraction

None of these escape the public operations for ordinary input. They carry
context into warnings and log entries instead.
"""

from dataclasses import dataclass, field
from typing import Any


class DealExtractionEngineError(Exception):
    """Base exception for all deal extraction engine errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} | context={self.context}"
        return self.message


# =============================================================================
# Stage Errors
# =============================================================================


class FieldExtractionError(DealExtractionEngineError):
    """Error while extracting fields from a single boundary."""

    pass


class MissingDealNameError(FieldExtractionError):
    """No deal name could be matched or inferred for a boundary."""

    pass


# =============================================================================
# Partial Success Handling
# =============================================================================


@dataclass
class ItemResult:
    """Result for a single boundary in an extraction batch."""

    item_id: str | None
    success: bool
    error: DealExtractionEngineError | None = None
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class PartialSuccessResult:
    """
    Result of a batch operation that may partially succeed.

    Allows extraction to continue when individual boundaries fail,
    while preserving error context for debugging.
    """

    succeeded: list[ItemResult] = field(default_factory=list)
    failed: list[ItemResult] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.succeeded)

    @property
    def failure_count(self) -> int:
        return len(self.failed)

    @property
    def total_count(self) -> int:
        return self.success_count + self.failure_count

    @property
    def all_succeeded(self) -> bool:
        return self.failure_count == 0

    @property
    def partial_success(self) -> bool:
        return self.success_count > 0 and self.failure_count > 0

    def add_success(
        self,
        item_id: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> None:
        """Record a successful item."""
        self.succeeded.append(
            ItemResult(item_id=item_id, success=True, data=data or {})
        )

    def add_failure(
        self,
        error: DealExtractionEngineError,
        item_id: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> None:
        """Record a failed item."""
        self.failed.append(
            ItemResult(item_id=item_id, success=False, error=error, data=data or {})
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'success_count': self.success_count,
            'failure_count': self.failure_count,
            'total_count': self.total_count,
            'all_succeeded': self.all_succeeded,
            'succeeded_ids': [r.item_id for r in self.succeeded if r.item_id],
            'failed_ids': [r.item_id for r in self.failed if r.item_id],
            'errors': [
                {'item_id': r.item_id, 'error': str(r.error)}
                for r in self.failed
                if r.error
            ],
        }


# =============================================================================
# Error Handling Utilities
# =============================================================================


def wrap_extraction_error(
    exc: Exception,
    context: dict[str, Any] | None = None,
) -> FieldExtractionError:
    """
    Wrap an unexpected per-boundary exception in our typed error hierarchy.

    Errors that are already FieldExtractionError instances are returned
    with the extra context merged in.

    Args:
        exc: The original exception
        context: Additional context for debugging

    Returns:
        FieldExtractionError (or the original subclass instance)
    """
    ctx = context or {}
    if isinstance(exc, FieldExtractionError):
        exc.context = {**ctx, **exc.context}
        return exc

    ctx['original_error'] = str(exc)
    ctx['error_type'] = type(exc).__name__
    return FieldExtractionError(
        f"Field extraction failed: {exc}",
        context=ctx,
    )

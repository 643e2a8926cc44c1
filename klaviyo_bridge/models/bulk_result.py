"""
Bulk catalog sync result models.

Dependencies: pydantic
System role: Partial-failure summary of a bulk catalog upsert
"""

from pydantic import BaseModel, Field


class BulkItemError(BaseModel):
    """Failure of one item in a bulk sync."""

    product_id: str = Field(description="Source product id, 'unknown' if absent")
    error: str = Field(description="Error message")


class BulkResult(BaseModel):
    """Summary of a bulk catalog sync, errors in input order."""

    success: int = 0
    failed: int = 0
    errors: list[BulkItemError] = Field(default_factory=list)

    @property
    def total(self) -> int:
        """Number of items processed."""
        return self.success + self.failed

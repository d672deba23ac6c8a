"""Offset pagination helpers."""

import math

from tiny_inventory.schemas.common import PageMeta


def calculate_skip(page: int, limit: int) -> int:
    """Number of rows to skip before the given 1-based page."""
    return (page - 1) * limit


def build_page_meta(total: int, page: int, limit: int) -> PageMeta:
    """Pagination metadata for a page of results.

    Args:
        total: Total number of matching rows.
        page: Current 1-based page.
        limit: Page size.

    Returns:
        PageMeta with totalPages = ceil(total / limit).
    """
    return PageMeta(
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit) if limit > 0 else 0,
    )

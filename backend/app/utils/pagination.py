"""
Pagination helper for list endpoints (internships, applications).

Responses carry: items, total, page, page_size, total_pages, has_next, has_previous
"""
from typing import Any, Dict, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

MAX_PAGE_SIZE = 100


async def paginate(
    db: AsyncSession,
    query: Select,
    page: int = 1,
    page_size: int = 10,
    count_query: Optional[Select] = None
) -> Dict[str, Any]:
    """
    Run `query` for one page.

    The total comes from `count_query` when given, otherwise from a
    COUNT over the query as a subquery.
    """
    page = max(1, page)
    page_size = max(1, min(MAX_PAGE_SIZE, page_size))

    if count_query is None:
        count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar() or 0
    total_pages = max(1, -(-total // page_size))

    result = await db.execute(query.offset((page - 1) * page_size).limit(page_size))

    return {
        "items": list(result.scalars().all()),
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_previous": page > 1,
    }

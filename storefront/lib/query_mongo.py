from typing import Any, Dict, List, Optional, Type

from mongoengine import Document, Q

import const


def clamp_paging(page, per_page, max_per_page=const.MAX_PER_PAGE):
    page = max(int(page or const.DEFAULT_PAGE), 1)
    per_page = max(1, min(int(per_page or const.DEFAULT_PER_PAGE), max_per_page))
    return page, per_page


def select_with_pagination_mongo(
    model: Type[Document],
    page: int,
    per_page: int,
    filters: Optional[List[Q]] = None,
    order_by: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """One page of ``model``; ``page`` starts at 1 and the echoed paging is the one served."""
    page, per_page = clamp_paging(page, per_page)

    qs = model.objects
    for cond in filters or []:
        qs = qs.filter(cond)
    if order_by:
        qs = qs.order_by(*order_by)

    total = qs.count()
    items = qs.skip((page - 1) * per_page).limit(per_page)

    return {
        "total": total,
        "page": page,
        "per_page": per_page,
        "pages": (total + per_page - 1) // per_page,
        "items": list(items),
    }

from math import ceil

from survey_platform.interfaces.web.schemas.pagination import PageMeta


def parse_page_number(raw: str | None) -> int:
    if raw is None:
        return 1
    try:
        page = int(raw)
    except ValueError:
        return 1
    return max(page, 1)


def build_page(total: int, page: int, per_page: int) -> PageMeta:
    if per_page < 1:
        raise ValueError("per_page must be positive")
    total_pages = ceil(total / per_page) if total > 0 else 0
    current_page = min(max(page, 1), max(total_pages, 1))
    offset = (current_page - 1) * per_page
    return PageMeta(
        page=current_page,
        per_page=per_page,
        total=total,
        total_pages=total_pages,
        offset=offset,
        has_next=current_page < total_pages,
        has_prev=current_page > 1,
    )

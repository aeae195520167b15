from pydantic import BaseModel


class PageMeta(BaseModel):
    page: int
    per_page: int
    total: int
    total_pages: int
    offset: int
    has_next: bool
    has_prev: bool

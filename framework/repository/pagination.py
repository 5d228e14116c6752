"""Page result returned by BaseRepository.get_paged."""

import math
from dataclasses import dataclass, field
from typing import Generic, List, TypeVar

T = TypeVar("T")


def clamp_page(page_number: int, page_size: int, max_page_size: int) -> tuple[int, int]:
    """Force 1-based page number and 1 <= page_size <= max_page_size."""
    page_number = max(1, int(page_number or 1))
    page_size = max(1, min(max_page_size, int(page_size or 1)))
    return page_number, page_size


@dataclass
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    total_count: int = 0
    page_number: int = 1
    page_size: int = 10

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_next_page(self) -> bool:
        return self.page_number < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.page_number > 1

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.page_size

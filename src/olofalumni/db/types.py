"""Small value types shared by repositories."""

from dataclasses import dataclass

MAX_PAGE_SIZE = 100


@dataclass
class PaginationParams:
    """Limit/offset window for list queries such as the feedback wall."""

    limit: int
    offset: int = 0

    def __post_init__(self) -> None:
        if self.limit < 1 or self.limit > MAX_PAGE_SIZE:
            raise ValueError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
        if self.offset < 0:
            raise ValueError("offset must be >= 0")

"""Page request clamping."""

from dataclasses import dataclass

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200

# Offsets must fit a signed 64-bit integer on every backend
MAX_OFFSET = 2**62


@dataclass(frozen=True)
class PageRequest:
    """A clamped page request."""

    page: int
    page_size: int

    @property
    def offset(self) -> int:
        """Number of rows to skip."""
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        """Maximum number of rows to return."""
        return self.page_size


def max_page(page_size: int) -> int:
    """Highest page number whose offset stays within ``MAX_OFFSET``."""
    return MAX_OFFSET // page_size + 1


def clamp_page(
    page: int | None,
    page_size: int | None,
    default_page_size: int = DEFAULT_PAGE_SIZE,
    max_page_size: int = MAX_PAGE_SIZE,
) -> PageRequest:
    """Clamp caller paging values to sane bounds.

    Args:
        page: Requested page number (1-based)
        page_size: Requested page size
        default_page_size: Size used when none is requested
        max_page_size: Upper bound for the page size

    Returns:
        PageRequest with 1 <= page <= max_page(page_size) and
        1 <= page_size <= max_page_size
    """
    if page_size is None:
        page_size = default_page_size
    page_size = max(1, min(page_size, max_page_size))
    if page is None or page < 1:
        page = 1
    page = min(page, max_page(page_size))
    return PageRequest(page=page, page_size=page_size)

from enum import Enum


class CatalogKind(Enum):
    """Represents the independent listing feeds of a source."""
    POPULAR = "popular"
    LATEST = "latest"
    SEARCH = "search"


class MangaStatus(Enum):
    """Represents publication status of a title."""
    UNKNOWN = 0
    ONGOING = 1
    COMPLETED = 2


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64; rv:128.0) Gecko/20100101 Firefox/128.0"
)
DEFAULT_PAGE_PARAMETER = "page"
DEFAULT_QUERY_PARAMETER = "query"

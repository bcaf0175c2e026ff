from dataclasses import dataclass
from typing import List, Optional

from pydantic import BaseModel

from app.domain.models.video import VideoRecord

SORT_DIRECTIONS = ("asc", "desc")
SORT_TYPES = ("date", "views")


@dataclass(frozen=True)
class ListingQuery:
    """Parâmetros de uma página da listagem de vídeos (um por request)."""
    page: int = 1
    limit: int = 10
    query: Optional[str] = None
    sort_by: str = "desc"
    sort_type: str = "date"
    user_id: Optional[str] = None

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


class Pagination(BaseModel):
    currentPage: int
    totalVideos: int
    totalPages: int
    hasPrevPage: bool
    hasNextPage: bool


class VideoPage(BaseModel):
    videos: List[VideoRecord]
    pagination: Pagination

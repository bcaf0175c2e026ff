# app/routers/videos.py
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from ..domain.models.listing import ListingQuery, VideoPage
from ..domain.models.response import ApiResponse
from ..domain.models.user_model import UserContext
from ..domain.models.video import VideoRecord
from ..domain.repositories.video_repository_interface import IUserRepository, IVideoRepository
from ..infrastructure.repositories.user_repo import UserRepo
from ..infrastructure.repositories.video_repo import VideoRepo
from ..services import video_query, video_service
from app.auth import require_user

router = APIRouter(
    prefix="/api/v1/videos",
    tags=["videos"],
    dependencies=[Depends(require_user)]
)


def get_video_repo() -> IVideoRepository:
    return VideoRepo()

def get_user_repo() -> IUserRepository:
    return UserRepo()


@router.get("/all-videos", response_model=ApiResponse[VideoPage])
async def get_all_videos(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    query: Optional[str] = Query(None),
    sortBy: str = Query("desc"),
    sortType: str = Query("date"),
    userId: Optional[str] = Query(None),
    videos: IVideoRepository = Depends(get_video_repo),
    users: IUserRepository = Depends(get_user_repo),
):
    q = ListingQuery(page=page, limit=limit, query=query, sort_by=sortBy, sort_type=sortType, user_id=userId)
    result, found = await video_query.list_videos(q, videos, users)
    message = "Videos fetched successfully" if found else "No videos found"
    return ApiResponse[VideoPage](statusCode=200, data=result, message=message)


@router.post("/publish-video", response_model=ApiResponse[VideoRecord], status_code=201)
async def publish_a_video(
    title: Optional[str] = Form(None, max_length=200),
    description: Optional[str] = Form(None),
    duration: float = Form(0, ge=0),
    videoFile: Optional[UploadFile] = File(None),
    thumbnail: Optional[UploadFile] = File(None),
    repo: IVideoRepository = Depends(get_video_repo),
    user: UserContext = Depends(require_user),
):
    video = await video_service.publish_video(
        title=title,
        description=description,
        video_file=videoFile,
        thumbnail=thumbnail,
        owner=user,
        repo=repo,
        duration=duration,
    )
    return ApiResponse[VideoRecord](statusCode=201, data=video, message="Video uploaded successfully")


@router.get("/c/{video_id}", response_model=ApiResponse[VideoRecord])
async def get_video_by_id(
    video_id: str,
    repo: IVideoRepository = Depends(get_video_repo),
):
    video = await video_service.get_video_by_id(video_id, repo)
    return ApiResponse[VideoRecord](statusCode=200, data=video, message="Video fetched successfully")

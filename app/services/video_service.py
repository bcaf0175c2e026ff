# app/services/video_service.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

from bson import ObjectId
from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from app.config import settings
from app.core.errors import InvalidArgument, NotFound, PayloadTooLarge, QueryExecutionFailed, StorageFailed
from app.core.metrics import UPLOAD_BYTES
from app.domain.models.user_model import UserContext
from app.domain.models.video import VideoRecord
from app.domain.repositories.video_repository_interface import IVideoRepository
from app.services.video_query import by_id_pipeline, to_records
from app.utils import s3 as s3_utils
from app.utils.id_gen import new_id

logger = logging.getLogger("videos")

VIDEO_MIME_PREFIX = "video/"
IMAGE_MIME_PREFIX = "image/"


async def _read_upload(file: Optional[UploadFile], mime_prefix: str, label: str) -> bytes:
    if file is None or not file.filename:
        raise InvalidArgument(f"{label} file is required")
    if not (file.content_type or "").startswith(mime_prefix):
        raise InvalidArgument(f"{label} file must be of type {mime_prefix}*")

    data = await file.read()
    UPLOAD_BYTES.inc(len(data))

    max_bytes = settings.max_upload_mb * 1024 * 1024
    if len(data) > max_bytes:
        raise PayloadTooLarge(f"{label} file exceeds the {settings.max_upload_mb}MB limit")
    return data


async def _store(prefix: str, vid: str, file: UploadFile, data: bytes, stored: List[str]) -> str:
    _, key = s3_utils.build_s3_key(prefix, file.filename, vid=vid)
    try:
        await run_in_threadpool(
            s3_utils.put_object,
            settings.s3_bucket, key, data, file.content_type or "application/octet-stream",
        )
    except Exception as e:
        logger.exception("Falha ao salvar %s no storage", key)
        raise StorageFailed("Failed to store uploaded file") from e
    stored.append(key)
    return s3_utils.object_url(settings.s3_bucket, key)


async def _discard(keys: List[str]) -> None:
    """Remove do S3 os objetos de uma publicação que não chegou ao banco."""
    for key in keys:
        try:
            await run_in_threadpool(s3_utils.delete_object, settings.s3_bucket, key)
        except Exception:
            logger.exception("Objeto órfão ficou no storage: %s", key)


async def fetch_enriched(repo: IVideoRepository, video_id: str) -> Optional[VideoRecord]:
    try:
        docs = await repo.aggregate(by_id_pipeline(video_id))
    except Exception as e:
        logger.exception("Falha ao buscar vídeo %s", video_id)
        raise QueryExecutionFailed("Something went wrong while fetching the video") from e
    records = to_records(docs[:1], "Something went wrong while fetching the video")
    return records[0] if records else None


async def publish_video(
    *,
    title: Optional[str],
    description: Optional[str],
    video_file: Optional[UploadFile],
    thumbnail: Optional[UploadFile],
    owner: UserContext,
    repo: IVideoRepository,
    duration: float = 0,
) -> VideoRecord:
    if not title or not title.strip():
        raise InvalidArgument("Title is required")
    if not description or not description.strip():
        raise InvalidArgument("Description is required")
    if not ObjectId.is_valid(owner.id):
        raise InvalidArgument("Invalid owner ID format")

    thumb_bytes = await _read_upload(thumbnail, IMAGE_MIME_PREFIX, "Thumbnail")
    video_bytes = await _read_upload(video_file, VIDEO_MIME_PREFIX, "Media")

    vid = new_id()
    stored: List[str] = []
    try:
        thumb_url = await _store("thumbnails", vid, thumbnail, thumb_bytes, stored)
        video_url = await _store("videos", vid, video_file, video_bytes, stored)
    except StorageFailed:
        await _discard(stored)
        raise

    now = datetime.now(timezone.utc)
    doc = {
        "_id": ObjectId(vid),
        "title": title.strip(),
        "description": description.strip(),
        "videoFile": video_url,
        "thumbnail": thumb_url,
        "duration": duration or 0,
        "views": 0,
        "isPublished": True,
        "owner": ObjectId(owner.id),
        "createdAt": now,
        "updatedAt": now,
    }
    try:
        await repo.insert(doc)
    except Exception as e:
        logger.exception("Falha ao inserir vídeo %s", vid)
        await _discard(stored)
        raise QueryExecutionFailed("Something went wrong while uploading the video") from e

    logger.info("Vídeo publicado: %s (%d bytes)", vid, len(video_bytes),
                extra={"size_bytes": len(video_bytes)})

    created = await fetch_enriched(repo, vid)
    if created is None:
        raise QueryExecutionFailed("Something went wrong while uploading the video")
    return created


async def get_video_by_id(video_id: str, repo: IVideoRepository) -> VideoRecord:
    """Busca o vídeo e conta uma visualização a cada chamada (sem deduplicar)."""
    if not ObjectId.is_valid(video_id):
        raise InvalidArgument("Invalid Video Id")

    try:
        matched = await repo.increment_views(video_id)
    except Exception as e:
        logger.exception("Falha ao incrementar views de %s", video_id)
        raise QueryExecutionFailed("Something went wrong while fetching the video") from e
    if not matched:
        raise NotFound("Video doesn't exist")

    video = await fetch_enriched(repo, video_id)
    if video is None:
        raise NotFound("Video doesn't exist")
    return video

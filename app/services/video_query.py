# app/services/video_query.py
"""
Listagem paginada de vídeos.

A consulta é um pipeline de agregação (match -> lookup do dono -> first ->
sort -> project) executado duas vezes: uma com $skip/$limit para a página
e outra com $count para o total. Os dois pipelines compartilham o mesmo
prefixo, senão totalPages/hasNextPage não batem com a página devolvida.
"""
import asyncio
import logging
import math
import re
from typing import Any, Dict, List, Tuple

from bson import ObjectId
from pydantic import ValidationError

from app.config import settings
from app.core.errors import InvalidArgument, QueryExecutionFailed
from app.core.metrics import LISTING_RESULTS
from app.domain.models.listing import SORT_DIRECTIONS, SORT_TYPES, ListingQuery, Pagination, VideoPage
from app.domain.models.video import VideoRecord
from app.domain.repositories.video_repository_interface import IUserRepository, IVideoRepository

logger = logging.getLogger("videos.query")

Stage = Dict[str, Any]

OWNER_FIELDS = ("username", "fullname", "avatar")
VIDEO_FIELDS = (
    "title", "description", "videoFile", "thumbnail", "duration",
    "views", "isPublished", "createdAt", "updatedAt", "owner",
)
SORT_FIELDS = {"date": "createdAt", "views": "views"}


def validate_listing(q: ListingQuery) -> None:
    if q.sort_by not in SORT_DIRECTIONS:
        raise InvalidArgument("sortBy must be either 'asc' or 'desc'")
    if q.sort_type not in SORT_TYPES:
        raise InvalidArgument("sortType must be either 'date' or 'views'")
    if q.user_id and not ObjectId.is_valid(q.user_id):
        raise InvalidArgument("Invalid user ID format")


def match_stage(q: ListingQuery) -> Stage | None:
    cond: Dict[str, Any] = {}
    if q.user_id:
        cond["owner"] = ObjectId(q.user_id)

    text = (q.query or "").strip()
    if text:
        # substring literal, sem tokenizar e sem interpretar metacaracteres
        pattern = {"$regex": re.escape(text), "$options": "i"}
        cond["$or"] = [{"title": pattern}, {"description": pattern}]

    return {"$match": cond} if cond else None


def owner_stages() -> List[Stage]:
    """Left outer join com users e colapso do array para um único valor."""
    return [
        {
            "$lookup": {
                "from": settings.users_collection,
                "localField": "owner",
                "foreignField": "_id",
                "as": "ownerDetails",
                "pipeline": [{"$project": {f: 1 for f in OWNER_FIELDS}}],
            }
        },
        {"$addFields": {"owner": {"$first": "$ownerDetails"}}},
    ]


def sort_stage(q: ListingQuery) -> Stage:
    field = SORT_FIELDS["date"] if q.sort_type == "date" else SORT_FIELDS["views"]
    order = 1 if q.sort_by == "asc" else -1
    # _id desempata: o $sort do Mongo não é estável entre consultas
    return {"$sort": {field: order, "_id": order}}


def project_stage() -> Stage:
    return {"$project": {f: 1 for f in VIDEO_FIELDS}}


def build_pipelines(q: ListingQuery) -> Tuple[List[Stage], List[Stage]]:
    """Devolve (pipeline da página, pipeline de contagem)."""
    validate_listing(q)

    base: List[Stage] = []
    match = match_stage(q)
    if match:
        base.append(match)
    base.extend(owner_stages())
    base.append(sort_stage(q))
    base.append(project_stage())

    data = base + [{"$skip": q.skip}, {"$limit": q.limit}]
    count = base + [{"$count": "totalVideos"}]
    return data, count


def to_records(docs: List[dict], failure_message: str) -> List[VideoRecord]:
    """Converte documentos do Mongo; documento fora do formato vira QueryExecutionFailed."""
    try:
        return [VideoRecord.model_validate(d) for d in docs]
    except ValidationError as e:
        logger.exception("Documento de vídeo inválido na coleção %s", settings.videos_collection)
        raise QueryExecutionFailed(failure_message) from e


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    total_pages = math.ceil(total / limit) if total else 0
    return Pagination(
        currentPage=page,
        totalVideos=total,
        totalPages=total_pages,
        hasPrevPage=page > 1,
        hasNextPage=page < total_pages,
    )


async def list_videos(
    q: ListingQuery,
    videos: IVideoRepository,
    users: IUserRepository,
) -> Tuple[VideoPage, bool]:
    """
    Executa a listagem. Devolve a página e um flag indicando se achou algo.

    Página vazia não é erro: volta com paginação zerada.
    """
    data_pipeline, count_pipeline = build_pipelines(q)

    if q.user_id:
        try:
            found = await users.exists(q.user_id)
        except Exception as e:
            logger.exception("Falha ao verificar usuário %s", q.user_id)
            raise QueryExecutionFailed("Something went wrong while fetching the videos") from e
        if not found:
            raise InvalidArgument("User does not exist")

    try:
        docs, count_result = await asyncio.gather(
            videos.aggregate(data_pipeline),
            videos.aggregate(count_pipeline),
        )
    except Exception as e:
        logger.exception("Falha ao executar pipelines de listagem")
        raise QueryExecutionFailed("Something went wrong while fetching the videos") from e

    LISTING_RESULTS.observe(len(docs or []))

    if not docs:
        empty = Pagination(
            currentPage=q.page, totalVideos=0, totalPages=0,
            hasPrevPage=False, hasNextPage=False,
        )
        return VideoPage(videos=[], pagination=empty), False

    total = count_result[0].get("totalVideos", 0) if count_result else 0
    page = VideoPage(
        videos=to_records(docs, "Something went wrong while fetching the videos"),
        pagination=build_pagination(q.page, q.limit, total),
    )
    logger.info(
        "Listagem ok",
        extra={"page": q.page, "limit": q.limit, "total": total},
    )
    return page, True


def by_id_pipeline(video_id: str) -> List[Stage]:
    """Mesmo enriquecimento da listagem, para um único vídeo."""
    return (
        [{"$match": {"_id": ObjectId(video_id)}}]
        + owner_stages()
        + [project_stage(), {"$limit": 1}]
    )

# app/infrastructure/repositories/video_repo.py
from typing import Any, Dict, List

from bson import ObjectId

from app.config import settings
from app.core.metrics import MONGO_OPS
from app.domain.repositories.video_repository_interface import IVideoRepository
import app.infrastructure.mongo as mongo_mod   # <-- importe o módulo, não o símbolo


class VideoRepo(IVideoRepository):
    def __init__(self, collection=None):
        self._collection = collection

    @property
    def collection(self):
        if self._collection is None:
            self._collection = mongo_mod.get_database()[settings.videos_collection]
        return self._collection

    async def aggregate(self, pipeline: List[Dict[str, Any]]) -> List[dict]:
        try:
            docs = await self.collection.aggregate(pipeline).to_list(length=None)
            MONGO_OPS.labels(op="aggregate", status="ok").inc()
            return docs
        except Exception:
            MONGO_OPS.labels(op="aggregate", status="error").inc()
            raise

    async def insert(self, document: dict) -> str:
        try:
            result = await self.collection.insert_one(document)
            MONGO_OPS.labels(op="insert", status="ok").inc()
        except Exception:
            MONGO_OPS.labels(op="insert", status="error").inc()
            raise
        return str(result.inserted_id)

    async def increment_views(self, video_id: str) -> bool:
        try:
            result = await self.collection.update_one(
                {"_id": ObjectId(video_id)},
                {"$inc": {"views": 1}},
            )
            MONGO_OPS.labels(op="update", status="ok").inc()
        except Exception:
            MONGO_OPS.labels(op="update", status="error").inc()
            raise
        return result.matched_count > 0

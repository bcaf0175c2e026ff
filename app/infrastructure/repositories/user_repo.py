# app/infrastructure/repositories/user_repo.py
from bson import ObjectId

from app.config import settings
from app.core.metrics import MONGO_OPS
from app.domain.repositories.video_repository_interface import IUserRepository
import app.infrastructure.mongo as mongo_mod


class UserRepo(IUserRepository):
    def __init__(self, collection=None):
        self._collection = collection

    @property
    def collection(self):
        if self._collection is None:
            self._collection = mongo_mod.get_database()[settings.users_collection]
        return self._collection

    async def exists(self, user_id: str) -> bool:
        try:
            n = await self.collection.count_documents({"_id": ObjectId(user_id)}, limit=1)
            MONGO_OPS.labels(op="exists", status="ok").inc()
        except Exception:
            MONGO_OPS.labels(op="exists", status="error").inc()
            raise
        return n > 0

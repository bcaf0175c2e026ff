from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from datetime import datetime
from typing import Annotated, Any, Optional

# ObjectId do Mongo sai como string na API
ObjectIdStr = Annotated[str, BeforeValidator(str)]


def _legacy_text(value: Any) -> str:
    # documentos antigos gravaram description como bool
    if value is None or isinstance(value, bool):
        return ""
    return str(value)


LegacyText = Annotated[str, BeforeValidator(_legacy_text)]


class UserSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[ObjectIdStr] = Field(default=None, alias="_id")
    username: Optional[str] = None
    fullname: Optional[str] = None
    avatar: Optional[str] = None


class VideoRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: ObjectIdStr = Field(..., alias="_id")
    title: LegacyText = ""
    description: LegacyText = ""
    videoFile: str = ""
    thumbnail: str = ""
    duration: float = 0
    views: int = Field(0, ge=0)
    isPublished: bool = True
    owner: Optional[UserSummary] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

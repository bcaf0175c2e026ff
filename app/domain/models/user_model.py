from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field
from typing import Annotated, Optional


class UserContext(BaseModel):
    """Usuário autenticado, como devolvido pelo /me do Auth Service."""
    model_config = ConfigDict(extra="ignore")

    id: Annotated[str, BeforeValidator(str)] = Field(..., validation_alias=AliasChoices("_id", "id"))
    username: str
    email: str
    fullname: Optional[str] = None
    avatar: Optional[str] = None
    is_active: bool = True

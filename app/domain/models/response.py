from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, model_validator

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope padrão das respostas de sucesso."""
    statusCode: int
    data: Optional[T] = None
    message: str = "Success"
    success: bool = True

    @model_validator(mode="after")
    def _derive_success(self):
        self.success = self.statusCode < 400
        return self

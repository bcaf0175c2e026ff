# app/domain/repositories/video_repository_interface.py
from abc import ABC, abstractmethod
from typing import Any, Dict, List


class IVideoRepository(ABC):
    """Contrato para persistência de vídeos"""

    @abstractmethod
    async def aggregate(self, pipeline: List[Dict[str, Any]]) -> List[dict]:
        """Executa um pipeline de agregação na coleção de vídeos"""
        pass

    @abstractmethod
    async def insert(self, document: dict) -> str:
        """Insere um novo vídeo e devolve o id gerado"""
        pass

    @abstractmethod
    async def increment_views(self, video_id: str) -> bool:
        """Soma 1 em views; False se o vídeo não existe"""
        pass


class IUserRepository(ABC):
    """Contrato de leitura de usuários"""

    @abstractmethod
    async def exists(self, user_id: str) -> bool:
        pass

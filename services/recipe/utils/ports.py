# services/recipe/utils/ports.py
"""
레시피 서비스 포트(인터페이스) 정의
- 매칭 전략, 외부 텍스트 생성기를 라우터에서 DI 로 교체할 수 있게 추상화
"""
from abc import ABC, abstractmethod
from typing import AbstractSet, Optional

from sqlalchemy.ext.asyncio import AsyncSession


class RecipeMatcherPort(ABC):
    @abstractmethod
    async def find_best_match(
        self,
        db: AsyncSession,
        core_ingredients: AbstractSet[str],
        exclude_ids: AbstractSet[int],
    ) -> Optional[int]:
        """조건을 만족하는 최적 레시피 ID 하나, 없으면 None"""
        raise NotImplementedError


class TextGeneratorPort(ABC):
    @abstractmethod
    async def generate_text(
        self,
        prompt: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        """
        프롬프트에 대한 원문 텍스트 반환
        - 타임아웃/전송 오류/2xx 이외 응답은 common.errors.RecipeGenerationError 로 올림
        """
        raise NotImplementedError

"""
Gemini 텍스트 생성 어댑터
외부 LLM(generateContent REST API)과 통신하는 모듈입니다.
- 요청당 한 번만 호출, 재시도하지 않음 (타임아웃은 호출자가 지정)
"""

import time
from typing import Any, Dict, Optional

import httpx

from common.errors import RecipeGenerationError
from common.logger import get_logger
from .ports import TextGeneratorPort

logger = get_logger("gemini_adapter")


class GeminiTextGenerator(TextGeneratorPort):
    """
    Gemini generateContent 엔드포인트를 호출하는 텍스트 생성기
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        api_base: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _build_payload(self, prompt: str, temperature: float, max_output_tokens: int) -> Dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_output_tokens,
            },
        }

    @staticmethod
    def _extract_text(data: Dict[str, Any]) -> str:
        """candidates[0].content.parts[*].text 를 이어 붙여 반환"""
        candidates = data.get("candidates") or []
        if not candidates:
            raise RecipeGenerationError("생성 결과(candidates)가 비어 있습니다.")
        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        if not text.strip():
            raise RecipeGenerationError("생성 결과 텍스트가 비어 있습니다.")
        return text

    async def generate_text(self, prompt: str, temperature: float, max_output_tokens: int) -> str:
        """
        Gemini 에 프롬프트를 보내고 원문 텍스트를 반환합니다.

        Args:
            prompt: 프롬프트 텍스트
            temperature: 샘플링 온도
            max_output_tokens: 최대 출력 토큰 수

        Returns:
            생성된 원문 텍스트 (JSON 여부는 호출자가 판단)
        """
        start_time = time.time()
        url = f"{self.api_base}/models/{self.model}:generateContent"
        payload = self._build_payload(prompt, temperature, max_output_tokens)
        logger.info(f"Gemini 생성 요청: model={self.model}, temperature={temperature}, prompt_len={len(prompt)}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(url, params={"key": self.api_key}, json=payload)
                response.raise_for_status()
                text = self._extract_text(response.json())
        except httpx.TimeoutException as e:
            logger.error(f"Gemini 타임아웃: {self.timeout}s 초과, 총 {time.time() - start_time:.3f}s")
            raise RecipeGenerationError("텍스트 생성 서비스 응답 시간이 초과되었습니다.") from e
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Gemini HTTP 에러: status={e.response.status_code}, "
                f"response='{e.response.text[:500]}', 총 {time.time() - start_time:.3f}s"
            )
            raise RecipeGenerationError(f"텍스트 생성 서비스 오류: status={e.response.status_code}") from e
        except (httpx.RequestError, ValueError) as e:
            logger.error(f"Gemini 호출 실패: 총 {time.time() - start_time:.3f}s, error='{e!r}'")
            raise RecipeGenerationError("텍스트 생성 서비스 호출에 실패했습니다.") from e

        logger.info(f"Gemini 생성 성공: 총 {time.time() - start_time:.3f}s, 응답 길이={len(text)}")
        return text

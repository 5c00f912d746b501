"""
공통 의존성
- 기기 ID 는 클라이언트가 보낸 값을 그대로 믿는 '주장된 신원'(ClaimedDevice)
  인증된 사용자와 혼동하지 않도록 별도 타입으로만 전달
"""
from dataclasses import dataclass
from typing import Optional

from common.logger import get_logger

logger = get_logger("dependencies")


@dataclass(frozen=True)
class ClaimedDevice:
    """클라이언트가 주장하는 기기 ID (서버 검증 없음)"""

    device_id: str

    def __str__(self) -> str:
        return self.device_id


def claim_device(raw_device_id: Optional[str]) -> Optional[ClaimedDevice]:
    """
    요청에 담긴 기기 ID → ClaimedDevice
    - 없거나 공백이면 None (개인화/제외 없음)
    """
    if raw_device_id is None:
        return None
    device_id = raw_device_id.strip()
    if not device_id:
        logger.debug("빈 기기 ID 는 무시")
        return None
    return ClaimedDevice(device_id=device_id)

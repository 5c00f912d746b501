"""
PREMIUM_ENTITLEMENT ORM 모델
- 기기당 1행 (구매 검증은 하지 않고 클라이언트가 보낸 상태를 저장)
"""
from sqlalchemy import Boolean, Column, DateTime, String, func

from common.database.base_postgres import PostgresBase


class PremiumEntitlement(PostgresBase):
    __tablename__ = "PREMIUM_ENTITLEMENT"

    device_id = Column("DEVICE_ID", String(255), primary_key=True)
    is_premium = Column("IS_PREMIUM", Boolean, nullable=False, default=False)
    purchase_date = Column("PURCHASE_DATE", DateTime, nullable=True)
    purchase_token = Column("PURCHASE_TOKEN", String(500), nullable=True)
    updated_at = Column(
        "UPDATED_AT", DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

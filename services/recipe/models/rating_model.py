# services/recipe/models/rating_model.py
"""
RECIPE_VIEW (조회/평점 이벤트) ORM 모델
- (RECIPE_ID, DEVICE_ID) 당 1행: 행이 있으면 '본 레시피', RATING 이 있으면 평점 집계 대상
"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint, func

from common.database.base_postgres import PostgresBase


class RecipeView(PostgresBase):
    __tablename__ = "RECIPE_VIEW"
    __table_args__ = (
        UniqueConstraint("RECIPE_ID", "DEVICE_ID", name="uq_recipe_view_recipe_device"),
    )

    view_id = Column("VIEW_ID", Integer, primary_key=True, autoincrement=True)
    recipe_id = Column(
        "RECIPE_ID",
        Integer,
        ForeignKey("RECIPE.RECIPE_ID", onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    device_id = Column("DEVICE_ID", String(255), nullable=False, index=True)
    rating = Column("RATING", Integer, nullable=True, comment="1~5, NULL 이면 조회만 한 상태")
    viewed_at = Column("VIEWED_AT", DateTime, nullable=False, server_default=func.now())

# db_models/asset_edit_log.py
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from db_base import Base


class AssetEditLog(Base):
    """One row per windowed edit by a non-SuperAdmin; backs the once-per-window rule."""
    __tablename__ = "asset_edit_logs"
    __table_args__ = (
        Index("ix_asset_edit_logs_user_asset_time", "user_id", "asset_id", "edited_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    asset_id: Mapped[int] = mapped_column(nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    edited_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

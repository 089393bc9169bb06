# db_models/system_setting.py
from datetime import datetime

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from db_base import Base

EDIT_WINDOW_KEY = "user_edit_window"


class SystemSetting(Base):
    """Keyed singleton settings rows. The edit window lives under EDIT_WINDOW_KEY."""
    __tablename__ = "system_settings"

    id: Mapped[int] = mapped_column(primary_key=True)
    key_name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    start_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    end_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

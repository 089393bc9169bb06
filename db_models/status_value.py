# db_models/status_value.py
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from db_base import Base

DEFAULT_STATUS_COLOR = "#adb5bd"


class StatusValue(Base):
    """One entry of the lifecycle status catalog. `value` is what assets store."""
    __tablename__ = "statuses"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    value: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        nullable=False,
    )
    label: Mapped[str] = mapped_column(String(255), nullable=False)
    color: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=DEFAULT_STATUS_COLOR,
        server_default=DEFAULT_STATUS_COLOR,
    )

# db_models/location.py
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from db_base import Base


class Location(Base):
    __tablename__ = "asset_locations"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)

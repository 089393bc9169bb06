# db_models/department.py
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from db_base import Base


class Department(Base):
    __tablename__ = "departments"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # Name in the organisation's primary language; the alternate name is optional.
    name_native: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name_alt: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)

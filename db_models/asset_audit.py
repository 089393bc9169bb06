# db_models/asset_audit.py
from datetime import datetime

from sqlalchemy import String, Text, DateTime, ForeignKey, Index, SmallInteger, text
from sqlalchemy.orm import Mapped, mapped_column

from db_base import Base
from core.workflow import AuditState


class AssetAudit(Base):
    __tablename__ = "asset_audits"
    __table_args__ = (
        # At most one unconfirmed audit per asset.
        Index(
            "uq_asset_audits_one_unconfirmed",
            "asset_id",
            unique=True,
            postgresql_where=text("confirmed = 0"),
            sqlite_where=text("confirmed = 0"),
        ),
        Index("ix_asset_audits_checked", "checked_at", "id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # Not a foreign key: audit history outlives a deleted asset.
    asset_id: Mapped[int] = mapped_column(nullable=False, index=True)

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)

    # Asset's owning department at the time of the count.
    department_id: Mapped[int | None] = mapped_column(
        ForeignKey("departments.id"),
        nullable=True,
        index=True,
    )

    # Status asserted by the counter, a catalog value.
    status: Mapped[str] = mapped_column(String(100), nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    checked_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    confirmed: Mapped[int] = mapped_column(
        SmallInteger,
        nullable=False,
        default=AuditState.UNCONFIRMED.value,
        server_default=text("0"),
        index=True,
    )
    confirmed_by: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

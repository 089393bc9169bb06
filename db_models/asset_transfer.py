# db_models/asset_transfer.py
from datetime import datetime

from sqlalchemy import String, Text, DateTime, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column

from db_base import Base
from core.workflow import TransferStatus


class AssetTransfer(Base):
    __tablename__ = "asset_transfers"
    __table_args__ = (
        # At most one pending transfer per asset.
        Index(
            "uq_asset_transfers_one_pending",
            "asset_id",
            unique=True,
            postgresql_where=text("status = 'pending'"),
            sqlite_where=text("status = 'pending'"),
        ),
        Index("ix_asset_transfers_asset_requested", "asset_id", "requested_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # Not a foreign key: transfer history outlives a deleted asset.
    asset_id: Mapped[int] = mapped_column(nullable=False, index=True)

    from_department_id: Mapped[int | None] = mapped_column(
        ForeignKey("departments.id"),
        nullable=True,
        index=True,
    )
    to_department_id: Mapped[int] = mapped_column(
        ForeignKey("departments.id"),
        nullable=False,
        index=True,
    )

    requested_by: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)

    # pending / approved / rejected, see core.workflow.TRANSFER_TRANSITIONS
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=TransferStatus.PENDING.value,
        server_default=TransferStatus.PENDING.value,
        index=True,
    )

    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    requested_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Set on both approval and rejection.
    approved_by: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Text, Numeric, Date, ForeignKey, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from splitter.database.base import Base


class Repayment(Base):
    """Settlement paid towards outstanding debt.

    from_user_id == to_user_id marks a self-settlement.
    """

    __tablename__ = "repayments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    from_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    to_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    repayment_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    created_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        nullable=False
    )

    # Relationships
    from_user: Mapped["Profile"] = relationship(
        back_populates="repayments_made",
        foreign_keys=[from_user_id]
    )
    to_user: Mapped["Profile"] = relationship(
        back_populates="repayments_received",
        foreign_keys=[to_user_id]
    )

    @property
    def is_self_settlement(self) -> bool:
        return self.from_user_id == self.to_user_id

    def __repr__(self) -> str:
        return f"<Repayment(from={self.from_user_id}, to={self.to_user_id}, amount={self.amount})>"

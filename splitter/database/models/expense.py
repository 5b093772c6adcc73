import uuid
from datetime import date
from decimal import Decimal
from typing import List

from sqlalchemy import String, Text, Numeric, Date, Index, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from splitter.database.base import Base, TimestampMixin


class ExpenseCategory(Base):
    """Category an expense can be filed under."""

    __tablename__ = "expense_categories"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    icon: Mapped[str] = mapped_column(String(16), nullable=False, default="📦")
    color: Mapped[str] = mapped_column(String(16), nullable=False, default="#6b7280")

    # Relationships
    expenses: Mapped[List["Expense"]] = relationship(back_populates="category")

    def __repr__(self) -> str:
        return f"<ExpenseCategory(id={self.id}, name='{self.name}')>"


class Expense(Base, TimestampMixin):
    """Shared expense paid by one roommate."""

    __tablename__ = "expenses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="AED")
    expense_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    category_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("expense_categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    paid_by_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    payment_method: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="cash"
    )  # cash, credit_card, debit_card, bank_transfer

    # Relationships
    category: Mapped["ExpenseCategory"] = relationship(back_populates="expenses")
    paid_by: Mapped["Profile"] = relationship(
        back_populates="expenses_paid",
        foreign_keys=[paid_by_id]
    )

    __table_args__ = (
        Index("idx_expense_date", "expense_date", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Expense(id={self.id}, amount={self.amount}, description='{self.description}')>"

import uuid
from typing import List

from sqlalchemy import BigInteger, String, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from splitter.database.base import Base, TimestampMixin


class Account(Base, TimestampMixin):
    """Login credentials of a roommate."""

    __tablename__ = "accounts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    telegram_user_id: Mapped[int | None] = mapped_column(
        BigInteger,
        nullable=True,
        unique=True,
        index=True
    )  # set while signed in from Telegram

    # Relationships
    profile: Mapped["Profile"] = relationship(back_populates="account")

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, email='{self.email}')>"


class Profile(Base, TimestampMixin):
    """Group member that pays expenses and owes a share."""

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("accounts.id", ondelete="SET NULL"),
        nullable=True,
        unique=True
    )

    # Relationships
    account: Mapped["Account"] = relationship(back_populates="profile")
    expenses_paid: Mapped[List["Expense"]] = relationship(
        back_populates="paid_by",
        foreign_keys="Expense.paid_by_id"
    )
    repayments_made: Mapped[List["Repayment"]] = relationship(
        back_populates="from_user",
        foreign_keys="Repayment.from_user_id"
    )
    repayments_received: Mapped[List["Repayment"]] = relationship(
        back_populates="to_user",
        foreign_keys="Repayment.to_user_id"
    )

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, name='{self.name}')>"

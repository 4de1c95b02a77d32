"""
SQLAlchemy 2.x ORM models for the Invoice Dashboard API.

The tables are owned by the wider invoicing application; these models
mirror that schema so queries can be built against it and so the setup
script can create it for development.
Models use the Mapped[] type annotation syntax and mapped_column.
"""

import datetime
import uuid

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from app.domain.enums import InvoiceStatus


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class Revenue(Base):
    """Precomputed revenue aggregate, one row per month."""

    __tablename__ = "revenue"

    month: Mapped[str] = mapped_column(String(4), primary_key=True)
    revenue: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self) -> str:
        return f"<Revenue(month={self.month}, revenue={self.revenue})>"


class Customer(Base):
    """A billed customer. Has zero or more invoices."""

    __tablename__ = "customers"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Relationships
    invoices: Mapped[list["Invoice"]] = relationship("Invoice", back_populates="customer")

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, name={self.name})>"


class Invoice(Base):
    """
    An invoice issued to exactly one customer.

    ``amount`` is stored in minor currency units (cents).
    """

    __tablename__ = "invoices"
    __table_args__ = (
        CheckConstraint(
            "status IN ({})".format(", ".join(f"'{s}'" for s in InvoiceStatus.values())),
            name="chk_invoices_status",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("customers.id"), nullable=False, index=True
    )
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)

    # Relationships
    customer: Mapped[Customer] = relationship("Customer", back_populates="invoices")

    def __repr__(self) -> str:
        return f"<Invoice(id={self.id}, amount={self.amount}, status={self.status})>"

"""SQLAlchemy ORM models for the registry tables"""

from sqlalchemy import CheckConstraint, Column, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class ItemRow(Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class ClientRow(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    birth_date = Column(Date, nullable=False)
    country = Column(String(100), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class BankRow(Base):
    __tablename__ = "banks"
    __table_args__ = (
        CheckConstraint("type IN ('PRIVATE', 'GOVERNMENT')", name="ck_banks_type"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class CreditRow(Base):
    __tablename__ = "credits"

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    bank_id = Column(Integer, ForeignKey("banks.id", ondelete="CASCADE"), nullable=False, index=True)
    min_payment = Column(Float, nullable=False)
    max_payment = Column(Float, nullable=False)
    term_months = Column(Integer, nullable=False)
    credit_type = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default="PENDING")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


# Creation order matters: credits references clients and banks
SCHEMA_TABLES = (ItemRow.__table__, ClientRow.__table__, BankRow.__table__, CreditRow.__table__)

"""SQLAlchemy models for ledgerwell database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Float,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Account(Base):
    """Account model. The account currency is stored flattened."""

    __tablename__ = "accounts"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    total_owed = Column(Float, default=0.0, nullable=False)
    total_owed_to_me = Column(Float, default=0.0, nullable=False)
    currency_id = Column(String, nullable=False)
    currency_code = Column(String, nullable=False)
    currency_name = Column(String, nullable=False)
    currency_symbol = Column(String, nullable=False)
    currency_rate = Column(Float, nullable=False)
    currency_is_custom = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="account", cascade="all, delete-orphan")


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(String, primary_key=True)
    account_id = Column(String, ForeignKey("accounts.id"), nullable=False)
    type = Column(String, nullable=False)
    amount = Column(Float, nullable=False)
    currency_id = Column(String, nullable=False)
    currency_code = Column(String, nullable=False)
    currency_name = Column(String, nullable=False)
    currency_symbol = Column(String, nullable=False)
    currency_rate = Column(Float, nullable=False)
    currency_is_custom = Column(Boolean, default=False, nullable=False)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    date = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    account = relationship("Account", back_populates="transactions")


class StoredCurrency(Base):
    """Currency stored on top of the built-in list (custom or updated rate)."""

    __tablename__ = "currencies"

    id = Column(String, primary_key=True)
    code = Column(String, nullable=False)
    name = Column(String, nullable=False)
    symbol = Column(String, nullable=False)
    rate = Column(Float, nullable=False)
    is_custom = Column(Boolean, default=False, nullable=False)
    position = Column(Integer, nullable=False, default=0)


class Settings(Base):
    """Single-row settings table."""

    __tablename__ = "settings"

    id = Column(Integer, primary_key=True)
    language = Column(String, nullable=False)
    theme = Column(String, nullable=False)
    auto_update_rates = Column(Boolean, nullable=False)
    default_currency_id = Column(String, nullable=True)
    default_currency_code = Column(String, nullable=True)
    default_currency_name = Column(String, nullable=True)
    default_currency_symbol = Column(String, nullable=True)
    default_currency_rate = Column(Float, nullable=True)
    default_currency_is_custom = Column(Boolean, nullable=True)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)

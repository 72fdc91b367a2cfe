"""
Base database models and utilities.

This module provides the foundational database components used across
all entities in the centralized database layer using SQLModel.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import ConfigDict
from sqlalchemy import DateTime, Numeric
from sqlmodel import Field, SQLModel


class Base(SQLModel):
    """Base class for all SQLModel entities."""

    model_config = ConfigDict(arbitrary_types_allowed=True)


def TimestampField(**kwargs) -> datetime:
    """Column storing a naive UTC ``DateTime`` whatever the SQLModel default mapping."""
    return Field(sa_type=DateTime(timezone=False), **kwargs)


def MoneyField(default: Decimal | None = None, **kwargs) -> Decimal:
    """Column storing an amount as ``NUMERIC(10, 2)``."""
    nullable = kwargs.pop("nullable", default is None)
    return Field(default=default, sa_type=Numeric(10, 2), nullable=nullable, **kwargs)

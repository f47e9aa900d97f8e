from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .session import Base

# Money and ratings come back as floats, matching the domain entities
Money = Numeric(10, 2, asdecimal=False)


class Profile(Base):
    """Profile model, one row per authenticated phone number"""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    phone: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    display_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    def __repr__(self):
        return f"<Profile(id={self.id}, phone='{self.phone}')>"


class Pet(Base):
    """Pet model owned by one profile"""

    __tablename__ = "pets"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    owner_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("profiles.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    species: Mapped[str] = mapped_column(String(20), nullable=False)
    breed: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    gender: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    birth_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    weight: Mapped[Optional[float]] = mapped_column(
        Numeric(6, 2, asdecimal=False), nullable=True
    )
    color: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    photo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    def __repr__(self):
        return f"<Pet(id={self.id}, name='{self.name}', species='{self.species}')>"


class Provider(Base):
    """Provider model for the read-only service catalog"""

    __tablename__ = "providers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    business_name: Mapped[str] = mapped_column(String(200), nullable=False)
    business_type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    address: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    district: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    province: Mapped[str] = mapped_column(String(100), nullable=False, default="Bangkok")
    phone: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    email: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    website: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    logo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    rating: Mapped[float] = mapped_column(
        Numeric(3, 2, asdecimal=False), nullable=False, default=0.0
    )
    review_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # {"monday": {"open": "09:00", "close": "18:00"}, "sunday": null, ...}
    opening_hours: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    services: Mapped[List["Service"]] = relationship(
        "Service",
        back_populates="provider",
        order_by="Service.sort_order",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Provider(id={self.id}, business_name='{self.business_name}')>"


class Service(Base):
    """Service model, a bookable offering of one provider"""

    __tablename__ = "services"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    provider_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("providers.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    price_min: Mapped[float] = mapped_column(Money, nullable=False, default=0)
    price_max: Mapped[float] = mapped_column(Money, nullable=False, default=0)
    pet_types: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    # Display order within the provider
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    provider: Mapped["Provider"] = relationship("Provider", back_populates="services")

    def __repr__(self):
        return f"<Service(id={self.id}, name='{self.name}', provider_id={self.provider_id})>"


class Booking(Base):
    """Booking model linking a profile's pet to a provider's service"""

    __tablename__ = "bookings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("profiles.id"), nullable=False, index=True
    )
    # No FK: deleting a pet keeps its bookings, which then hydrate with pet=None
    pet_id: Mapped[str] = mapped_column(String(36), nullable=False)
    provider_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("providers.id"), nullable=False
    )
    service_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("services.id"), nullable=False
    )
    booking_date: Mapped[date] = mapped_column(Date, nullable=False)
    booking_time: Mapped[str] = mapped_column(String(5), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    total_price: Mapped[Optional[float]] = mapped_column(Money, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        Index("ix_bookings_provider_slot", "provider_id", "booking_date", "booking_time"),
    )

    def __repr__(self):
        return (
            f"<Booking(id={self.id}, user_id={self.user_id}, provider_id={self.provider_id}, "
            f"date={self.booking_date}, time='{self.booking_time}', status={self.status})>"
        )

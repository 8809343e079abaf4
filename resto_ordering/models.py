from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    JSON,
    DateTime,
    ForeignKey,
    Index,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class Restaurant(Base):
    __tablename__ = "restaurants"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False)
    timezone = Column(String, nullable=False, default="Europe/Paris")
    owner_email = Column(String, nullable=True)

    # 'always' / 'manual' / 'auto'
    availability_mode = Column(String, nullable=False, default="manual")
    # Manual open flag, also the fallback when an auto schedule is empty
    is_open = Column(Boolean, nullable=False, default=True)
    # Master switch for new orders, independent of the schedule
    is_accepting_orders = Column(Boolean, nullable=False, default=True)

    # Legacy billing fields, only read when no subscription row exists
    subscription_status = Column(String, nullable=True)
    trial_end_date = Column(DateTime(timezone=True), nullable=True)
    bonus_weeks = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    hours = relationship(
        "RestaurantHours",
        back_populates="restaurant",
        cascade="all, delete-orphan",
        order_by="RestaurantHours.day_of_week",
    )
    subscriptions = relationship("Subscription", back_populates="restaurant", cascade="all, delete-orphan")


class RestaurantHours(Base):
    """One row per day of week (0=Sunday). slots is a list of {"open", "close"} dicts."""
    __tablename__ = "restaurant_hours"

    id = Column(Integer, primary_key=True, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)
    is_open = Column(Boolean, nullable=False, default=False)
    slots = Column(JSON, nullable=False, default=list)

    __table_args__ = (
        UniqueConstraint("restaurant_id", "day_of_week", name="uix_restaurant_day"),
    )

    restaurant = relationship("Restaurant", back_populates="hours")


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True)
    # trial / active / promo / past_due / pending_payment / expired / cancelled
    status = Column(String, nullable=False, index=True)
    trial_end = Column(DateTime(timezone=True), nullable=True)
    bonus_days = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    restaurant = relationship("Restaurant", back_populates="subscriptions")

    # "Most recent row per restaurant" lookups
    __table_args__ = (
        Index("ix_subscriptions_restaurant_created_at", "restaurant_id", "created_at"),
    )

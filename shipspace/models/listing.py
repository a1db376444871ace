from datetime import date

from sqlalchemy import CheckConstraint, Date, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from shipspace.core.ids import LISTING_PREFIX, gen_id

from shipspace.models.base import Base, TimestampMixin


class Listing(TimestampMixin, Base):
    __tablename__ = "listings"
    __table_args__ = (
        CheckConstraint("status IN ('pending', 'approved', 'rejected')", name="ck_listings_status"),
        CheckConstraint("kind IN ('offer', 'request')", name="ck_listings_kind"),
        CheckConstraint("spot_count >= 1", name="ck_listings_spot_count_positive"),
        Index("ix_listings_status_created_at", "status", "created_at"),
        Index("ix_listings_owner_created_at", "owner_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: gen_id(LISTING_PREFIX))

    # owner may have no profile row yet; enrichment falls back to "Unknown user"
    owner_id: Mapped[str] = mapped_column(String, nullable=False)

    # "offer" | "request"
    kind: Mapped[str] = mapped_column(String(20), nullable=False)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    origin_city: Mapped[str] = mapped_column(String(120), nullable=False)
    destination_city: Mapped[str] = mapped_column(String(120), nullable=False)
    loading_port: Mapped[str] = mapped_column(String(120), nullable=False)
    arrival_port: Mapped[str] = mapped_column(String(120), nullable=False)

    spot_count: Mapped[int] = mapped_column(Integer, nullable=False)
    vehicle_type: Mapped[str] = mapped_column(String(60), nullable=False)
    ship_date: Mapped[date] = mapped_column(Date, nullable=False)

    contact_email: Mapped[str] = mapped_column(String(320), nullable=False)
    contact_phone: Mapped[str] = mapped_column(String(40), nullable=False)

    # "pending" | "approved" | "rejected"
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")

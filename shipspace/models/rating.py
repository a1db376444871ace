from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from shipspace.core.ids import RATING_PREFIX, gen_id
from shipspace.models.base import Base


class Rating(Base):
    __tablename__ = "ratings"
    __table_args__ = (
        # one rating per reviewer per rated party; concurrent duplicates fail here
        UniqueConstraint("reviewer_id", "rated_party_id", name="uq_rating_reviewer_rated_party"),
        CheckConstraint("score BETWEEN 1 AND 5", name="ck_ratings_score_range"),
        CheckConstraint("reviewer_id <> rated_party_id", name="ck_ratings_no_self_rating"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: gen_id(RATING_PREFIX))

    reviewer_id: Mapped[str] = mapped_column(String, nullable=False)
    rated_party_id: Mapped[str] = mapped_column(String, nullable=False, index=True)

    # optional listing the rating was given in the context of
    listing_id: Mapped[str | None] = mapped_column(String, nullable=True)

    score: Mapped[int] = mapped_column(Integer, nullable=False)
    feedback: Mapped[str] = mapped_column(Text, nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

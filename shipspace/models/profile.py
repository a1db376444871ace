from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from shipspace.models.base import Base, TimestampMixin


class Profile(TimestampMixin, Base):
    __tablename__ = "profiles"

    # same value as the identity's user id
    id: Mapped[str] = mapped_column(String, primary_key=True)

    company_name: Mapped[str] = mapped_column(String(200), nullable=False)
    contact_person: Mapped[str] = mapped_column(String(200), nullable=False)
    phone: Mapped[str] = mapped_column(String(40), nullable=False)

    # managed by the internal bootstrap path only
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

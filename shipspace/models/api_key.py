from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from shipspace.core.ids import API_KEY_PREFIX, gen_id
from shipspace.models.base import Base, TimestampMixin


class ApiKey(TimestampMixin, Base):
    __tablename__ = "api_keys"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: gen_id(API_KEY_PREFIX))
    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)

    key_prefix: Mapped[str] = mapped_column(String(16), nullable=False)
    key_hash: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

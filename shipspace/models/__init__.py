from shipspace.models.base import Base  # noqa: F401

from shipspace.models.profile import Profile  # noqa: F401
from shipspace.models.api_key import ApiKey  # noqa: F401
from shipspace.models.listing import Listing  # noqa: F401
from shipspace.models.rating import Rating  # noqa: F401
from shipspace.models.audit_log import AuditLog  # noqa: F401

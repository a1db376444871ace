import uuid

LISTING_PREFIX = "lst"
RATING_PREFIX = "rtg"
USER_PREFIX = "usr"
API_KEY_PREFIX = "key"
AUDIT_PREFIX = "aud"


def gen_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"

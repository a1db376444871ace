import base64
import hashlib
import hmac
import secrets
from dataclasses import dataclass

from shipspace.core.config import settings

KEY_SCHEME = "ss"


@dataclass(frozen=True)
class ApiKeyParts:
    prefix: str
    plain: str
    hashed: str


def generate_api_key(prefix_len: int = 8) -> ApiKeyParts:
    """
    New key shaped ss_<prefix>_<secret>. Only `hashed` is persisted; `prefix`
    is stored alongside it so ops can tell keys apart without the secret.
    """
    secret = secrets.token_urlsafe(32)
    prefix = secrets.token_hex(prefix_len // 2)
    plain = f"{KEY_SCHEME}_{prefix}_{secret}"
    return ApiKeyParts(prefix=prefix, plain=plain, hashed=hash_api_key(plain))


def hash_api_key(plain: str) -> str:
    # HMAC keyed with the server-side pepper
    pepper = settings.api_key_pepper.get_secret_value().encode("utf-8")
    digest = hmac.new(pepper, plain.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def same_secret(given: str | None, expected: str) -> bool:
    if not given or not expected:
        return False
    return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))

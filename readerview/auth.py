import hashlib
import hmac
import logging
import secrets
import time
from typing import Optional

from .config import Settings

logger = logging.getLogger("readerview.auth")


def hash_password(password: str) -> str:
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def check_credentials(username: str, password: str, settings: Settings) -> bool:
    user_ok = hmac.compare_digest(username.encode("utf-8"), settings.username.encode("utf-8"))
    hash_ok = hmac.compare_digest(hash_password(password).encode("ascii"), settings.password_hash.encode("utf-8"))
    return user_ok and hash_ok


def _sign(data: str, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), data.encode("utf-8"), hashlib.sha256).hexdigest()


def issue_token(secret: str, now: Optional[float] = None) -> str:
    """Opaque session token: ``<random hex>:<issued ms>:<hmac>``."""
    issued_ms = int((time.time() if now is None else now) * 1000)
    data = f"{secrets.token_hex(32)}:{issued_ms}"
    return f"{data}:{_sign(data, secret)}"


def verify_token(token: Optional[str], secret: str, max_age: int, now: Optional[float] = None) -> bool:
    if not token:
        return False
    parts = token.split(":")
    if len(parts) != 3:
        return False
    nonce, issued, signature = parts
    if not hmac.compare_digest(_sign(f"{nonce}:{issued}", secret).encode("ascii"), signature.encode("utf-8")):
        return False
    try:
        issued_ms = int(issued)
    except ValueError:
        return False
    age = (time.time() if now is None else now) - issued_ms / 1000
    if age < 0 or age > max_age:
        logger.info("Rejected expired session token")
        return False
    return True

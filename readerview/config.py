import ipaddress
import logging
import os
import re
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger("readerview.config")

USER_AGENT = "Mozilla/5.0 (compatible; Reader/1.0)"

ALLOWED_SCHEMES = frozenset({"http", "https"})

# Hostnames rejected before any IP parsing
BLOCKED_HOSTNAMES = frozenset({"localhost", "::1"})

BLOCKED_NETWORKS = (
    ipaddress.ip_network("0.0.0.0/8"),
    ipaddress.ip_network("127.0.0.0/8"),
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("169.254.0.0/16"),
    ipaddress.ip_network("::/128"),
    ipaddress.ip_network("::1/128"),
    ipaddress.ip_network("fc00::/7"),
    ipaddress.ip_network("fe80::/10"),
)

# URLs matching these skip the network and get the built-in demo document
DEMO_URL_MARKER = "demo"
DEMO_DOMAIN = "example.com"

FETCH_FAILED_SUFFIX = " (Demo - Fetch Failed)"

# Minimum stripped text length for a container to count as the article
MIN_CONTENT_TEXT_LENGTH = 100

NOISE_TAGS = ("script", "style", "nav", "header", "footer", "aside", "iframe")
NOISE_CLASSES = ("ad", "advertisement", "social-share")

# Tried in order; first container with enough text wins
CONTENT_SELECTORS = (
    "article",
    '[role="main"]',
    "main",
    ".article-content",
    ".post-content",
    ".entry-content",
    "#content",
    ".content",
)

CHAPTER_TITLE_MAX_LENGTH = 50
ELLIPSIS = "..."
CHAPTER_ID_PREFIX = "chapter-"

# Matches paragraphs like "Chapter 2: The Awakening" or "PART 10"
CHAPTER_MARKER_RE = re.compile(r"^\s*(?:chapter|part)\s+\d+\b", re.I)

# Two or more newlines, possibly with whitespace between them
PARAGRAPH_BREAK_RE = re.compile(r"\n\s*\n")
SPACE_RUN_RE = re.compile(r"[ \t\f\v]+")

ALLOWED_TAGS = frozenset(
    {
        "p",
        "br",
        "strong",
        "b",
        "em",
        "i",
        "u",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "ul",
        "ol",
        "li",
        "a",
        "blockquote",
        "code",
        "pre",
        "img",
        "div",
        "span",
        "section",
    }
)

ALLOWED_ATTRIBUTES = frozenset({"href", "src", "alt", "title", "class", "id"})

ALLOWED_PROTOCOLS = frozenset({"http", "https", "mailto"})

# Elements whose text must not survive as plain text after stripping
DROP_WITH_CONTENT = (
    "script",
    "style",
    "noscript",
    "template",
    "iframe",
    "object",
    "embed",
    "svg",
    "math",
    "title",
    "textarea",
    "select",
    "noembed",
    "noframes",
    "xmp",
)

FONT_SIZE_DEFAULT = 18
FONT_SIZE_MIN = 12
FONT_SIZE_MAX = 32
FONT_SIZE_STEP = 2

AUTH_COOKIE_NAME = "auth-token"
DEFAULT_USERNAME = "abc"
DEFAULT_PASSWORD_HASH = "d3981f82aea12b4b0863a8e4c22ddf7fc8102c5582ed114352b9f9c9d429974f"
DEFAULT_TOKEN_SECRET = "default-secret-change-in-production"
TOKEN_MAX_AGE_SECONDS = 60 * 60 * 24 * 7

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    fetch_timeout: float = 20.0
    max_redirects: int = 5
    max_response_bytes: int = 5_000_000
    resolve_dns: bool = True
    require_auth: bool = True
    token_secret: str = DEFAULT_TOKEN_SECRET
    token_max_age: int = TOKEN_MAX_AGE_SECONDS
    username: str = DEFAULT_USERNAME
    password_hash: str = DEFAULT_PASSWORD_HASH
    secure_cookies: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        secret = os.environ.get("READER_TOKEN_SECRET", "")
        if not secret:
            logger.warning("READER_TOKEN_SECRET is not set; using the development secret")
            secret = DEFAULT_TOKEN_SECRET
        return cls(
            fetch_timeout=float(os.environ.get("READER_FETCH_TIMEOUT", "20")),
            max_redirects=int(os.environ.get("READER_MAX_REDIRECTS", "5")),
            max_response_bytes=int(os.environ.get("READER_MAX_RESPONSE_BYTES", "5000000")),
            resolve_dns=_env_bool("READER_RESOLVE_DNS", True),
            require_auth=_env_bool("READER_REQUIRE_AUTH", True),
            token_secret=secret,
            token_max_age=int(os.environ.get("READER_TOKEN_MAX_AGE", str(TOKEN_MAX_AGE_SECONDS))),
            username=os.environ.get("READER_USERNAME", DEFAULT_USERNAME),
            password_hash=os.environ.get("READER_PASSWORD_HASH", DEFAULT_PASSWORD_HASH).lower(),
            secure_cookies=_env_bool("READER_SECURE_COOKIES", False),
            log_level=os.environ.get("READER_LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(format=LOG_FORMAT, level=getattr(logging, level.upper(), logging.INFO))

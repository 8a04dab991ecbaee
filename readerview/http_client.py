import logging
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.parse import urljoin, urlparse

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import USER_AGENT, Settings
from .errors import TransportFailure, UpstreamFailure
from .url_analysis import check_resolved_host, validate_url

logger = logging.getLogger("readerview.http_client")

REDIRECT_STATUSES = (301, 302, 303, 307, 308)


@dataclass(frozen=True)
class FetchResult:
    html: str
    status: int
    url: str


def build_session() -> requests.Session:
    """Create a requests session with the reader User-Agent and no retries."""
    sess = requests.Session()
    retry = Retry(total=0, redirect=0, raise_on_status=False)
    adapter = HTTPAdapter(max_retries=retry)
    sess.mount("http://", adapter)
    sess.mount("https://", adapter)
    sess.headers.update({"User-Agent": USER_AGENT})
    return sess


def decode_body(resp: requests.Response, body: bytes) -> str:
    charset = requests.utils.get_encoding_from_headers(resp.headers)
    # requests assumes ISO-8859-1 for text/* without a charset; prefer UTF-8
    if not charset or "charset" not in resp.headers.get("content-type", "").lower():
        charset = "utf-8"
    try:
        return body.decode(charset, errors="replace")
    except LookupError:
        # Unknown charset label from the server
        return body.decode("utf-8", errors="replace")


class Fetcher:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
        log_fn: Optional[Callable[[str], None]] = None,
    ):
        self.settings = settings or Settings()
        self.session = session or build_session()
        self.log_fn = log_fn or logger.info

    def _check_hop(self, url: str) -> None:
        validate_url(url)
        if self.settings.resolve_dns:
            parsed = urlparse(url)
            check_resolved_host(parsed.hostname or "", parsed.port)

    def _read_capped(self, resp: requests.Response) -> bytes:
        limit = self.settings.max_response_bytes
        chunks = []
        total = 0
        for chunk in resp.iter_content(chunk_size=65536):
            total += len(chunk)
            if total > limit:
                self.log_fn(f"Response from {resp.url} exceeded {limit} bytes; truncating")
                chunks.append(chunk[: len(chunk) - (total - limit)])
                break
            chunks.append(chunk)
        return b"".join(chunks)

    def fetch(self, url: str) -> FetchResult:
        """GET ``url`` following redirects by hand so every hop is re-validated."""
        current = url
        for _hop in range(self.settings.max_redirects + 1):
            self._check_hop(current)
            self.log_fn(f"Requesting {current}")
            try:
                with self.session.get(
                    current,
                    timeout=self.settings.fetch_timeout,
                    allow_redirects=False,
                    stream=True,
                ) as resp:
                    if resp.status_code in REDIRECT_STATUSES:
                        location = resp.headers.get("location", "")
                        if not location:
                            raise UpstreamFailure(resp.status_code, "Redirect without Location")
                        current = urljoin(current, location)
                        self.log_fn(f"Redirected to {current}")
                        continue
                    if not 200 <= resp.status_code < 300:
                        logger.warning("Upstream %s answered %s %s", current, resp.status_code, resp.reason)
                        raise UpstreamFailure(resp.status_code, resp.reason or "")
                    body = self._read_capped(resp)
                    return FetchResult(html=decode_body(resp, body), status=resp.status_code, url=current)
            except requests.RequestException as exc:
                self.log_fn(f"Request failed for {current}: {exc}")
                raise TransportFailure(str(exc)) from exc
        raise TransportFailure(f"Too many redirects fetching {url}")

# Client cho nguồn phiên: GET source_url -> {"list": [{"id", "resultTruyenThong", "dices", "point"}, ...]}
# Timeout / lỗi kết nối được thử lại có giới hạn; payload hỏng báo lỗi ngay.

from __future__ import annotations

import time
from typing import Optional

import requests

from taixiu.config import settings
from taixiu.exceptions import MalformedSourcePayload, SourceUnavailable
from taixiu.logger import get_logger

logger = get_logger(__name__)


class SessionSource:
    def __init__(
        self,
        url: str = settings.source_url,
        timeout: float = settings.source_timeout,
        retries: int = settings.source_retries,
        backoff: float = settings.source_backoff,
        http: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.retries = max(0, retries)
        self.backoff = backoff
        self.http = http or requests.Session()

    def _get(self) -> requests.Response:
        attempts = self.retries + 1
        for attempt in range(1, attempts + 1):
            try:
                r = self.http.get(self.url, timeout=self.timeout)
                r.raise_for_status()
                return r
            except (requests.Timeout, requests.ConnectionError) as e:
                timed_out = isinstance(e, requests.Timeout)
                logger.warning(
                    "Source fetch attempt %d/%d failed (%s): %s",
                    attempt, attempts, "timeout" if timed_out else "connection", e,
                )
                if attempt == attempts:
                    msg = "Nguồn dữ liệu không phản hồi (timeout)." if timed_out else f"Không kết nối được nguồn dữ liệu: {e}"
                    raise SourceUnavailable(msg, timeout=timed_out) from e
                time.sleep(self.backoff * attempt)
            except requests.RequestException as e:
                raise SourceUnavailable(f"Lỗi khi gọi nguồn dữ liệu: {e}") from e
        raise SourceUnavailable("Nguồn dữ liệu không phản hồi.")

    def fetch_sessions(self) -> list[dict]:
        """Danh sách phiên (list dict, không rỗng)."""
        r = self._get()
        try:
            data = r.json()
        except ValueError as e:
            raise MalformedSourcePayload("Nguồn trả về dữ liệu không phải JSON.") from e
        items = data.get("list") if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise MalformedSourcePayload("Nguồn không trả về list hợp lệ.")
        items = [x for x in items if isinstance(x, dict)]
        if not items:
            raise MalformedSourcePayload("Nguồn không trả về list hợp lệ.")
        logger.debug("Fetched %d sessions from %s", len(items), self.url)
        return items

from __future__ import annotations

import os
import json
import base64
import asyncio
import logging
import tempfile
from typing import Any, Dict, Optional

import requests

from . import config
from .clock import Clock
from .models import DailyChecklist

logger = logging.getLogger(__name__)

API_BASE = "https://api.github.com"


class StoreError(RuntimeError):
    pass


# =========================================================
# Local JSON file
# =========================================================
class JSONFileStore:
    """Whole-document JSON file. Any read/parse failure yields a fresh document."""

    def __init__(self, path: str, clock: Clock):
        self.path = path
        self.clock = clock

    async def load(self) -> DailyChecklist:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                return DailyChecklist.from_dict(json.load(fh))
        except FileNotFoundError:
            logger.info("no checklist at %s, starting fresh", self.path)
        except (OSError, ValueError) as e:
            logger.warning("unreadable checklist at %s, starting fresh: %r", self.path, e)
        return DailyChecklist.fresh(self.clock.today())

    async def save(self, doc: DailyChecklist) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        fd, tmp = tempfile.mkstemp(prefix=".checklist-", suffix=".json", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(doc.to_dict(), fh, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise


# =========================================================
# GitHub JSON store (Contents API)
# =========================================================
class GitHubJSONStore:
    def __init__(self, repo: str, token: str, path: str, clock: Clock):
        if not repo or not token or not path:
            raise StoreError("Missing GITHUB_REPO / GITHUB_TOKEN / GITHUB_FILE")
        self.url = f"{API_BASE}/repos/{repo}/contents/{path}"
        self.headers = {
            "Authorization": f"token {token}",
            "Accept": "application/vnd.github+json",
        }
        self.clock = clock
        self._sha: Optional[str] = None
        # False until a GET has told us whether the file exists and at which sha
        self._sha_known = False

    async def load(self) -> DailyChecklist:
        try:
            r = await asyncio.to_thread(requests.get, self.url, headers=self.headers, timeout=30)
            if r.status_code == 404:
                logger.info("no checklist in repo yet, starting fresh")
                self._sha = None
                self._sha_known = True
                return DailyChecklist.fresh(self.clock.today())
            if r.status_code != 200:
                raise StoreError(f"GitHub GET failed ({r.status_code}): {r.text}")
            payload = r.json()
            self._sha = payload.get("sha")
            self._sha_known = True
            raw = base64.b64decode(payload.get("content") or "").decode("utf-8")
            return DailyChecklist.from_dict(json.loads(raw))
        except (requests.RequestException, StoreError, ValueError) as e:
            self._sha_known = self._sha is not None
            logger.warning("remote checklist unavailable, starting fresh: %r", e)
            return DailyChecklist.fresh(self.clock.today())

    async def save(self, doc: DailyChecklist) -> None:
        body: Dict[str, Any] = {
            "message": f"checklist: {doc.current_date}",
            "content": base64.b64encode(json.dumps(doc.to_dict(), indent=2).encode()).decode(),
        }
        if not self._sha_known:
            self._sha = await self._fetch_sha()
            self._sha_known = True
        if self._sha:
            body["sha"] = self._sha

        r = await asyncio.to_thread(requests.put, self.url, headers=self.headers, json=body, timeout=30)
        if r.status_code in (409, 422):
            self._sha_known = False
        if r.status_code not in (200, 201):
            raise StoreError(f"GitHub PUT failed ({r.status_code}): {r.text}")
        self._sha = r.json().get("content", {}).get("sha")

    async def _fetch_sha(self) -> Optional[str]:
        r = await asyncio.to_thread(requests.get, self.url, headers=self.headers, timeout=30)
        if r.status_code == 404:
            return None
        if r.status_code != 200:
            raise StoreError(f"GitHub GET failed ({r.status_code}): {r.text}")
        return r.json().get("sha")


def make_store(clock: Clock):
    if config.github_enabled():
        logger.info("using GitHub store %s/%s", config.GITHUB_REPO, config.GITHUB_FILE)
        return GitHubJSONStore(config.GITHUB_REPO, config.GITHUB_TOKEN, config.GITHUB_FILE, clock)
    logger.info("using local store %s", config.DATA_FILE)
    return JSONFileStore(config.DATA_FILE, clock)

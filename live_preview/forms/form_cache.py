"""
Form Cache: server-side record of issued node forms and their previews.

Each form build ID is issued for one content type and remembers whether a
preview has been rendered under it. Entries expire after ``ttl_seconds``
and the oldest are evicted once ``max_entries`` is reached.
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, Optional
from uuid import uuid4

from pydantic import BaseModel

from live_preview.errors import UnknownFormError

logger = logging.getLogger(__name__)


class FormCacheEntry(BaseModel):
    """One issued form build."""

    form_build_id: str
    node_type: str
    issued_at: datetime
    has_been_previewed: bool = False


class FormCache:
    """In-memory form cache with expiry and a size cap."""

    def __init__(self, ttl_seconds: int = 3600, max_entries: int = 1000):
        self.ttl = timedelta(seconds=ttl_seconds)
        self.max_entries = max_entries
        self._entries: Dict[str, FormCacheEntry] = {}

    def issue(self, node_type: str) -> FormCacheEntry:
        """Issue a new form build ID for a content type."""
        self.purge_expired()
        while len(self._entries) >= self.max_entries:
            oldest = min(self._entries.values(), key=lambda e: e.issued_at)
            del self._entries[oldest.form_build_id]
            logger.debug("Evicted form %s", oldest.form_build_id)
        entry = FormCacheEntry(
            form_build_id=f"form-{uuid4().hex}",
            node_type=node_type,
            issued_at=datetime.utcnow(),
        )
        self._entries[entry.form_build_id] = entry
        return entry

    def get(self, form_build_id: str, node_type: str) -> FormCacheEntry:
        """Get a live entry issued for ``node_type``, raising otherwise."""
        entry = self._entries.get(form_build_id)
        if entry is not None and self._is_expired(entry):
            del self._entries[form_build_id]
            entry = None
        if entry is None or entry.node_type != node_type:
            raise UnknownFormError(form_build_id)
        return entry

    def mark_previewed(self, form_build_id: str, node_type: str) -> None:
        """Record that a preview was rendered under this form."""
        self.get(form_build_id, node_type).has_been_previewed = True

    def has_been_previewed(self, form_build_id: Optional[str], node_type: str) -> bool:
        """Whether this form has been previewed. Raises for unknown IDs."""
        if form_build_id is None:
            return False
        return self.get(form_build_id, node_type).has_been_previewed

    def forget(self, form_build_id: Optional[str]) -> None:
        """Drop a form once it has been submitted."""
        if form_build_id is not None:
            self._entries.pop(form_build_id, None)

    def purge_expired(self) -> int:
        """Remove expired entries, returning how many were removed."""
        expired = [k for k, e in self._entries.items() if self._is_expired(e)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)

    def _is_expired(self, entry: FormCacheEntry) -> bool:
        return datetime.utcnow() - entry.issued_at > self.ttl

"""Cross-domain lookup — LID ⇄ phone-number JID mapping.

Best-effort only. The resolver treats ``None`` and any raised exception
the same way: no mapping for that one mention. Timeouts are the
backend's business (the core never imposes one).

Backends:
- SessionStoreLookup — reads the whatsmeow session store (SQLite)
- BridgeHttpLookup   — asks an HTTP bridge process
"""

import asyncio
import logging
import sqlite3
from typing import Optional

import httpx

from .errors import LookupResponseError
from .jid import LID_DOMAIN, extract_digits, jid_user, normalize_jid, phone_jid

logger = logging.getLogger("wamention.lookup")


class CrossDomainLookup:
    """Lookup capability. Both directions default to "no mapping"."""

    async def to_phone_jid(self, lid_jid: str) -> Optional[str]:
        """Map ``<lid>@lid`` to ``<digits>@s.whatsapp.net``."""
        return None

    async def to_lid_jid(self, pn_jid: str) -> Optional[str]:
        """Map ``<digits>@s.whatsapp.net`` to ``<lid>@lid``."""
        return None


def _user_digits(jid: str) -> str:
    user = jid_user(normalize_jid(jid))
    return user if user.isdigit() else ''


# ============================================================
# SESSION STORE (SQLite)
# ============================================================
# The bridge keeps its LID map in session.db:
#   whatsmeow_lid_map(lid TEXT PRIMARY KEY, pn TEXT)
# Opened read-only per query on a worker thread; the bridge owns the file.

class SessionStoreLookup(CrossDomainLookup):
    """LID map read from the bridge's SQLite session store."""

    def __init__(self, db_path: str, timeout: float = 1.0):
        self.db_path = db_path
        self.timeout = timeout
        self._pn_by_lid: dict[str, str] = {}   # lid digits -> pn digits ('' = known miss)
        self._lid_by_pn: dict[str, str] = {}

    def _query(self, sql: str, value: str) -> str:
        try:
            con = sqlite3.connect(f'file:{self.db_path}?mode=ro', uri=True, timeout=self.timeout)
            try:
                row = con.execute(sql, (value,)).fetchone()
            finally:
                con.close()
        except sqlite3.Error as e:
            logger.debug(f"Session store query failed ({self.db_path}): {e}")
            return ''
        return str(row[0]) if row and row[0] else ''

    def lookup_pn(self, lid: str) -> str:
        """Phone digits for LID digits ('' if unknown). Cached."""
        if not lid or not lid.isdigit():
            return ''
        cached = self._pn_by_lid.get(lid)
        if cached is not None:
            return cached
        pn = extract_digits(self._query('SELECT pn FROM whatsmeow_lid_map WHERE lid=? LIMIT 1', lid))
        self._pn_by_lid[lid] = pn
        return pn

    def lookup_lid(self, pn: str) -> str:
        """LID digits for phone digits ('' if unknown). Cached."""
        if not pn or not pn.isdigit():
            return ''
        cached = self._lid_by_pn.get(pn)
        if cached is not None:
            return cached
        lid = extract_digits(self._query('SELECT lid FROM whatsmeow_lid_map WHERE pn=? LIMIT 1', pn))
        self._lid_by_pn[pn] = lid
        return lid

    async def to_phone_jid(self, lid_jid: str) -> Optional[str]:
        loop = asyncio.get_running_loop()
        pn = await loop.run_in_executor(None, self.lookup_pn, _user_digits(lid_jid))
        return phone_jid(pn) if pn else None

    async def to_lid_jid(self, pn_jid: str) -> Optional[str]:
        loop = asyncio.get_running_loop()
        lid = await loop.run_in_executor(None, self.lookup_lid, _user_digits(pn_jid))
        return f"{lid}@{LID_DOMAIN}" if lid else None


# ============================================================
# HTTP BRIDGE
# ============================================================
#   GET {base}/lid/{digits} -> {"pn": "6281234567"}
#   GET {base}/pn/{digits}  -> {"lid": "123456789012"}
# 404 means "not mapped". Anything else non-2xx raises.

class BridgeHttpLookup(CrossDomainLookup):
    """LID map served by a bridge process over HTTP."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._transport = transport

    async def _fetch(self, path: str, key: str) -> str:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.get(f"{self.base_url}{path}")
            if resp.status_code == 404:
                return ''
            resp.raise_for_status()
            try:
                data = resp.json()
            except ValueError as e:
                raise LookupResponseError(f"{path}: body is not JSON") from e
        if not isinstance(data, dict):
            raise LookupResponseError(f"{path}: expected an object, got {type(data).__name__}")
        return extract_digits(str(data.get(key) or ''))

    async def to_phone_jid(self, lid_jid: str) -> Optional[str]:
        lid = _user_digits(lid_jid)
        if not lid:
            return None
        pn = await self._fetch(f"/lid/{lid}", "pn")
        return phone_jid(pn) if pn else None

    async def to_lid_jid(self, pn_jid: str) -> Optional[str]:
        pn = _user_digits(pn_jid)
        if not pn:
            return None
        lid = await self._fetch(f"/pn/{pn}", "lid")
        return f"{lid}@{LID_DOMAIN}" if lid else None


def build_lookup(settings) -> Optional[CrossDomainLookup]:
    """Pick a backend from settings: session store first, then HTTP bridge."""
    if settings.lid_store_path:
        return SessionStoreLookup(settings.lid_store_path)
    if settings.bridge_url:
        return BridgeHttpLookup(settings.bridge_url, timeout=settings.lookup_timeout)
    return None

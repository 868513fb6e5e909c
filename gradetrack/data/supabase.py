"""
Hosted record store.

Talks to the Supabase PostgREST endpoint (``<url>/rest/v1/<table>``) that
holds the web app's official record.
"""

import logging
import time

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..exceptions import PersistenceError
from .store import RecordStore

logger = logging.getLogger(__name__)


# Methods that are safe to replay: reads, and writes addressed to one row by id.
# POST (insert/upsert) is never retried, since a request that failed after the
# row was stored would insert it twice.
RETRY_METHODS = ["GET", "PATCH", "DELETE"]


def create_retry_session(max_retries: int = 3, backoff_factor: float = 0.6) -> requests.Session:
    """
    Session that retries transient failures at the transport level.

    429 and 5xx responses are retried for RETRY_METHODS only. Connection
    failures before a request is sent are retried for every method. Anything
    still failing after that is reported, never replayed.
    """
    session = requests.Session()
    retries = Retry(
        total=max_retries,
        connect=max_retries,
        read=max_retries,
        status=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=RETRY_METHODS,
        respect_retry_after_header=True,
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retries)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def _quote(value) -> str:
    text = str(value)
    if any(ch in text for ch in ',()" '):
        escaped = text.replace('"', '\\"')
        return f'"{escaped}"'
    return text


def _filter_params(filters: dict) -> dict:
    """PostgREST filter syntax: ``col=eq.value`` / ``col=in.(a,b)``."""
    params = {}
    for column, value in (filters or {}).items():
        if isinstance(value, (list, tuple, set)):
            params[column] = "in.(" + ",".join(_quote(v) for v in value) + ")"
        elif value is None:
            params[column] = "is.null"
        else:
            params[column] = f"eq.{value}"
    return params


class SupabaseStore(RecordStore):
    """
    RecordStore over Supabase's REST API.

    Semester deletes rely on the database's ON DELETE CASCADE foreign key to
    remove courses. Row-level security scopes everything to the user whose
    ``access_token`` is sent; without one the anon ``api_key`` is used.

    Usage:
        store = SupabaseStore("https://xyz.supabase.co", api_key, access_token)
        rows = store.list("semesters", {"user_id": uid}, order="index")
    """

    def __init__(self, url: str, api_key: str, access_token: str = None,
                 timeout: tuple = (5.0, 20.0), max_retries: int = 3, session=None):
        self.base_url = url.rstrip("/") + "/rest/v1"
        self.timeout = timeout
        self.session = session if session is not None else create_retry_session(max_retries)
        self.session.headers.update({
            "apikey": api_key,
            "Authorization": f"Bearer {access_token or api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

    def close(self):
        self.session.close()

    def _request(self, method: str, table: str, params=None, json=None, headers=None):
        url = f"{self.base_url}/{table}"
        start = time.monotonic()
        try:
            resp = self.session.request(
                method, url, params=params, json=json, headers=headers, timeout=self.timeout
            )
            resp.raise_for_status()
        except requests.exceptions.HTTPError as e:
            detail = ""
            if e.response is not None:
                detail = e.response.text[:200]
            raise PersistenceError(f"{method} {table} failed: {e} {detail}".rstrip()) from e
        except requests.exceptions.RequestException as e:
            raise PersistenceError(f"{method} {table} failed: {e}") from e

        cost_ms = int((time.monotonic() - start) * 1000)
        logger.debug("%s %s -> %s (%dms)", method, table, resp.status_code, cost_ms)
        return resp

    def list(self, table, filters=None, order=None):
        params = {"select": "*"}
        params.update(_filter_params(filters))
        if order:
            params["order"] = f"{order}.asc"
        return self._request("GET", table, params=params).json()

    def create(self, table, fields):
        resp = self._request(
            "POST", table, json=fields, headers={"Prefer": "return=representation"}
        )
        rows = resp.json()
        if not rows:
            raise PersistenceError(f"Insert into {table} returned no row")
        return rows[0] if isinstance(rows, list) else rows

    def update(self, table, row_id, fields):
        self._request(
            "PATCH", table, params={"id": f"eq.{row_id}"}, json=fields,
            headers={"Prefer": "return=minimal"},
        )

    def delete(self, table, row_id):
        self._request("DELETE", table, params={"id": f"eq.{row_id}"})

    def upsert(self, table, key, fields):
        self._request(
            "POST", table, params={"on_conflict": key}, json=fields,
            headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
        )

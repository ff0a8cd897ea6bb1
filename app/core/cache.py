from __future__ import annotations
import hashlib
import json
from typing import Any, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from app.core.config import settings

# ---------------------------------------------------------------------------
# ETag helpers
# ---------------------------------------------------------------------------

def make_etag(body: bytes) -> str:
    return f'"{hashlib.md5(body).hexdigest()}"'


def dumps_deterministic(obj: Any) -> bytes:
    return json.dumps(
        obj,
        ensure_ascii=False,
        separators=(",", ":"),
        sort_keys=True,
    ).encode("utf-8")


def _cache_control_value(max_age: Optional[int], swr: Optional[int]) -> str:
    max_age = settings.CACHE_MAX_AGE if max_age is None else max_age
    swr = settings.CACHE_SWR if swr is None else swr
    return f"private, max-age={int(max_age)}, stale-while-revalidate={int(swr)}"


def apply_cache_headers(
    response: Response,
    etag: str,
    *,
    max_age: Optional[int] = None,
    swr: Optional[int] = None,
) -> None:
    """Set ETag, Cache-Control and Vary: Authorization (responses sit behind auth)."""
    response.headers["ETag"] = etag
    response.headers["Cache-Control"] = _cache_control_value(max_age, swr)
    response.headers["Vary"] = "Authorization"


# ---------------------------------------------------------------------------
# JSON response with ETag (+ 304 when If-None-Match matches)
# ---------------------------------------------------------------------------

def etag_json(
    request: Request,
    payload: Any,
    *,
    status_code: int = 200,
    max_age: Optional[int] = None,
    swr: Optional[int] = None,
) -> Response:
    content = jsonable_encoder(payload)
    etag = make_etag(dumps_deterministic(content))

    if request.headers.get("If-None-Match") == etag:
        resp = Response(status_code=304)
        apply_cache_headers(resp, etag, max_age=max_age, swr=swr)
        return resp

    resp = JSONResponse(status_code=status_code, content=content)
    apply_cache_headers(resp, etag, max_age=max_age, swr=swr)
    return resp

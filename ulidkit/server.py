from __future__ import annotations

import logging
import os
from typing import Any

from fastapi import Body, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from . import __version__
from .result import Result
from .timeutil import ms_to_iso
from .ulid import TIME_CHARS, decode_bytes, encode, generate, to_binary


logger = logging.getLogger(__name__)

MAX_GENERATE_COUNT = 1000


def _unwrap(res: Result) -> Any:
    if not res.ok:
        raise HTTPException(status_code=400, detail={"kind": res.kind.value, "detail": res.detail})
    return res.value


def _api_key_from_request(request: Request) -> str:
    header_key = request.headers.get("x-api-key")
    if header_key:
        return header_key.strip()
    auth = request.headers.get("authorization") or ""
    if auth.lower().startswith("bearer "):
        return auth[7:].strip()
    return ""


def _is_local_client(request: Request) -> bool:
    host = (request.client.host if request.client else "") or ""
    if host in ("127.0.0.1", "::1", "localhost", "testclient"):
        return True
    if host.startswith("127."):
        return True
    return False


def create_app(api_key: str | None = None) -> FastAPI:
    api_key = api_key if api_key is not None else (os.environ.get("ULIDKIT_API_KEY") or "")
    app = FastAPI(title="ulidkit", version=__version__)
    app.state.api_key_required = bool(api_key)
    app.state.auth_mode = "api_key" if api_key else "local_only_no_key"

    @app.middleware("http")
    async def auth_middleware(request: Request, call_next):  # type: ignore[no-untyped-def]
        path = request.url.path
        method = request.method.upper()
        guarded = path.startswith("/api/") and (path != "/api/health") and (method != "OPTIONS")

        if guarded and api_key:
            if _api_key_from_request(request) != api_key:
                logger.warning("denied %s %s: missing or invalid api key", method, path)
                return JSONResponse(status_code=401, content={"detail": "API key required"})
        elif guarded and not _is_local_client(request):
            logger.warning("denied %s %s: non-local client without api key", method, path)
            return JSONResponse(
                status_code=401,
                content={"detail": "Non-local API access requires ULIDKIT_API_KEY and request auth header."},
            )
        return await call_next(request)

    @app.get("/api/health")
    def health(request: Request) -> dict[str, Any]:
        return {
            "status": "ok",
            "version": __version__,
            "authEnabled": bool(getattr(request.app.state, "api_key_required", False)),
            "authMode": str(getattr(request.app.state, "auth_mode", "unknown")),
        }

    @app.get("/api/ulid/generate")
    def api_generate(
        time: int | None = Query(default=None),
        count: int = Query(default=1, ge=1, le=MAX_GENERATE_COUNT),
    ) -> dict[str, Any]:
        items = [_unwrap(generate() if time is None else generate(time)) for _ in range(count)]
        return {"items": items}

    @app.post("/api/ulid/encode")
    def api_encode(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
        raw = str(payload.get("hex") or "").strip()
        try:
            data = bytes.fromhex(raw)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"invalid hex: {raw!r}")
        return {"ulid": _unwrap(encode(data))}

    @app.get("/api/ulid/{value}/decode")
    def api_decode(value: str) -> dict[str, Any]:
        time, rand = _unwrap(decode_bytes(value))
        try:
            time_iso = ms_to_iso(time)
        except OverflowError:
            time_iso = None
        return {
            "ulid": value,
            "time": time,
            "timeIso": time_iso,
            "randomness": value[TIME_CHARS:],
            "randomnessHex": rand.hex(),
        }

    @app.get("/api/ulid/{value}/binary")
    def api_binary(value: str) -> dict[str, Any]:
        return {"hex": _unwrap(to_binary(value)).hex()}

    return app

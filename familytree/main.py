from __future__ import annotations

import logging
import os
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

try:
    from .middleware import RequestLogMiddleware
    from .routes import marriages, members, network, parent_child
except ImportError:  # pragma: no cover
    # Support running with CWD=familytree (e.g., `python -m uvicorn main:app`).
    from middleware import RequestLogMiddleware
    from routes import marriages, members, network, parent_child

def _log_level() -> str:
    return (os.environ.get("LOG_LEVEL") or "INFO").strip().upper()


logging.basicConfig(
    level=_log_level(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def _cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "*")
    return [o.strip() for o in raw.split(",") if o.strip()]


app = FastAPI(title="Family Tree API", version="0.1.0")

app.add_middleware(RequestLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(members.router)
app.include_router(marriages.router)
app.include_router(parent_child.router)
app.include_router(network.router)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

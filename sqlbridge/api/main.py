"""FastAPI dispatch boundary: one POST endpoint per command name."""

import contextlib
from collections.abc import AsyncGenerator
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from sqlbridge import commands
from sqlbridge.errors import SqlBridgeError
from sqlbridge.lib import codec
from sqlbridge.lib.store import registry as registry_mod


@contextlib.asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    yield
    registry_mod.shutdown()


app = FastAPI(title="sqlbridge", lifespan=lifespan)


class Invocation(BaseModel):
    """Command arguments. Accepts the host's camelCase names as aliases."""

    model_config = ConfigDict(populate_by_name=True)

    path: str | None = Field(default=None, alias="dbPath")
    query: str | None = Field(default=None, alias="sql")
    params: list[Any] = Field(default_factory=list)
    key: str | None = None
    value: Any = None
    options: dict[str, Any] = Field(default_factory=dict)
    queries: list[Any] = Field(default_factory=list)


def _require(value, name: str):
    if value is None:
        raise HTTPException(status_code=422, detail=f"Missing argument: {name}")
    return value


def _open(body: Invocation):
    return commands.open(_require(body.path, "path"), body.options)


def _load(body: Invocation):
    return commands.load(body.options)


def _set_pragma(body: Invocation):
    return commands.set_pragma(_require(body.path, "path"), _require(body.key, "key"), body.value)


def _select(body: Invocation):
    rows = commands.select(_require(body.path, "path"), _require(body.query, "query"), body.params)
    return [codec.row_to_dynamic(row) for row in rows]


def _select_first(body: Invocation):
    row = commands.select_first(
        _require(body.path, "path"), _require(body.query, "query"), body.params
    )
    return codec.row_to_dynamic(row)


def _execute(body: Invocation):
    return commands.execute(_require(body.path, "path"), _require(body.query, "query"), body.params)


def _batch(body: Invocation):
    return commands.batch(_require(body.path, "path"), body.queries)


HANDLERS = {
    "open": _open,
    "load": _load,
    "set_pragma": _set_pragma,
    "select": _select,
    "select_first": _select_first,
    "execute": _execute,
    "batch": _batch,
}


@app.get("/health")
def health():
    return {"ok": True, "open": registry_mod.default().paths()}


@app.post("/invoke/{command}")
def invoke(command: str, body: Invocation):
    handler = HANDLERS.get(command)
    if handler is None:
        raise HTTPException(status_code=404, detail=f"Unknown command {command}")
    try:
        result = handler(body)
    except SqlBridgeError as e:
        return JSONResponse(
            status_code=400,
            content={"ok": False, "error": str(e), "kind": type(e).__name__},
        )
    except ValueError as e:
        return JSONResponse(
            status_code=400,
            content={"ok": False, "error": str(e), "kind": "ValueError"},
        )
    return {"ok": True, "result": result}

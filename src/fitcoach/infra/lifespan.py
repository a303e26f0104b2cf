"""Lifespan dependency injection bridge.

``inject`` lets the FastAPI lifespan declare ``Depends()`` parameters
like a route handler does, so startup resources (database engine,
tracing) are resolved by FastAPI's own dependency solver in DAG order.

Based on https://github.com/fastapi/fastapi/discussions/11742
"""

from contextlib import AsyncExitStack, asynccontextmanager
from functools import partial
from typing import Any, Callable

from fastapi import FastAPI, Request
from fastapi.dependencies.utils import get_dependant, solve_dependencies


def get_app(request: Request) -> FastAPI:
    """Lifespan dependency that returns the running application."""
    return request.app


def _lifespan_request(app: FastAPI) -> Request:
    return Request(
        scope={
            "type": "http",
            "http_version": "1.1",
            "method": "GET",
            "scheme": "http",
            "path": "/",
            "raw_path": b"/",
            "query_string": b"",
            "root_path": "",
            "headers": ((b"X-Request-Scope", b"lifespan"),),
            "client": ("localhost", 80),
            "server": ("localhost", 80),
            "state": app.state,
            "app": app,
        }
    )


def inject(
    lifespan: Callable[..., Any],
) -> Callable[[FastAPI], Any]:
    """Resolve ``Depends()`` parameters for a lifespan function.

    Usage::

        @inject
        async def lifespan(
            app: FastAPI,
            _db: Annotated[None, Depends(build_db)],
        ):
            yield

    Every dependency generator owns its setup and teardown; the exit
    stack unwinds them in reverse order on shutdown.
    ``app.dependency_overrides`` is honoured.
    """

    @asynccontextmanager
    async def wrapper(app: FastAPI):  # type: ignore[misc]
        dependant = get_dependant(path="/", call=partial(lifespan, app))

        async with AsyncExitStack() as stack:
            solved = await solve_dependencies(
                request=_lifespan_request(app),
                dependant=dependant,
                async_exit_stack=stack,
                embed_body_fields=False,
                dependency_overrides_provider=app,
            )
            ctx = asynccontextmanager(lifespan)
            async with ctx(app, **solved.values):
                yield

    return wrapper

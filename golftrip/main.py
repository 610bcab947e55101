import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse

from .db import Base, engine
from .exceptions import TripError
from .routers import courses, fines, leaderboards, matches, players, rounds, scores, teams, votes
from .settings import get_settings

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Golf Trip")

    for module in (players, teams, courses, rounds, scores, matches, fines, votes, leaderboards):
        app.include_router(module.router, prefix=API_PREFIX)

    @app.exception_handler(TripError)
    async def trip_error_handler(request: Request, exc: TripError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.info("%s %s rejected (%d): %s", request.method, request.url.path,
                        exc.status_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.get("/", include_in_schema=False)
    def root():
        return RedirectResponse(url="/docs")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


Base.metadata.create_all(bind=engine)

app = create_app()

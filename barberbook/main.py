import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from barberbook.api.v1.catalog import router as catalog_router
from barberbook.api.v1.providers import router as providers_router
from barberbook.api.v1.wizard import router as wizard_router
from barberbook.core.config import settings
from barberbook.wiring.dependencies import Container, build_container


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("provider_id", "session_id", "reservation_id", "step", "status", "error", "reason"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)


def create_app(container: Container | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        active = container or build_container(settings)
        await active.open()
        app.state.container = active
        try:
            yield
        finally:
            await active.close()

    app = FastAPI(title="Barber Booking", version="1.0.0", lifespan=lifespan)

    app.include_router(catalog_router, prefix="/api/v1", tags=["catalog"])
    app.include_router(providers_router, prefix="/api/v1", tags=["providers"])
    app.include_router(wizard_router, prefix="/api/v1", tags=["wizard"])

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()

from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from app.core import config, database, exception_handlers, redis
from app.core.event_bus import event_bus
from app.core.middleware import build_moderation_gate
from app.domains import moderation
from app.domains.moderation.analytics import ModerationTracker

VERSION = "1.0.0"

tracker = ModerationTracker(bus=event_bus)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await database.init_db()
    moderation.register_event_handlers(event_bus)
    app.state.moderation = moderation.build_moderation_service(tracker=tracker)
    yield
    await redis.RedisManager.close()
    await database.engine.dispose()


app = FastAPI(title="modhub moderation backend", version=VERSION, lifespan=lifespan)

moderation_gate = build_moderation_gate(config.settings, tracker=tracker)
app.middleware("http")(moderation_gate)
exception_handlers.setup_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(moderation.router, prefix="/api/moderation", tags=["Moderation"])
app.include_router(moderation.admin_router, prefix="/api/admin/moderation", tags=["Moderation admin"])


@app.get("/health")
async def health():
    services = {
        "database": await database.check_connection(),
        "redis": await redis.check_connection(),
    }
    status = "healthy" if all(services.values()) else "degraded"
    return {"status": status, "services": services, "version": VERSION}

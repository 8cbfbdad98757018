import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from database import init_db
from api.deps import MSG_INVALID_PAYLOAD, flatten_validation_errors
from api.plaid import router as plaid_router
from api.prequalifications import router as prequalifications_router
from api.purchases import router as purchases_router
from api.scenarios import router as scenarios_router
from api.subscriptions import router as subscriptions_router
from services.journey_repository import InMemoryJourneyRepository
from services.journey_store import JourneyStore
from services.scheduler import AsyncioScheduler
from services.sealing import get_payload_sealer

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    app.state.journey_store = JourneyStore(
        repository=InMemoryJourneyRepository(),
        sealer=get_payload_sealer(),
        scheduler=AsyncioScheduler(),
    )
    logger.info("%s started", settings.app_name)
    yield
    app.state.journey_store.close()


app = FastAPI(
    title=settings.app_name,
    description="Car finance journeys, quotes and checkout notifications",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": MSG_INVALID_PAYLOAD, "details": flatten_validation_errors(exc.errors())},
    )


app.include_router(prequalifications_router)
app.include_router(plaid_router)
app.include_router(purchases_router)
app.include_router(subscriptions_router)
app.include_router(scenarios_router)


@app.get("/health")
async def health():
    return {"status": "ok"}

import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .config import settings
from .deps import capture_session
from .capture.api import router as capture_router
from .relay.api import router as relay_router
from .tutor.api import router as tutor_router

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    capture_session.stop()


app = FastAPI(title="MathSolver AI", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)
app.include_router(capture_router)
app.include_router(tutor_router)
app.include_router(relay_router)


@app.get("/health")
def health():
    return {"status": "ok"}


def run():
    import uvicorn
    uvicorn.run(
        "mathsolver.main:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8000")),
    )


if __name__ == "__main__":
    run()

import logging
import os
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aeros import data
from aeros.log import configure_logging
from aeros.routes import router
from aeros.topology import GeographyLoader, GeographyUnavailable

configure_logging()
logger = logging.getLogger(__name__)

CORS_ORIGINS = [o.strip() for o in os.environ.get("AEROS_CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with httpx.AsyncClient(timeout=30) as client:
        try:
            data.us_states_features = await GeographyLoader().load(client)
        except GeographyUnavailable as e:
            logger.warning("Starting without state geography: %s", e)
            data.us_states_features = None
    yield


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

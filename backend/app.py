import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend import config
from backend.routers import buildings, venues

logging.basicConfig(level=config.LOG_LEVEL,
                    format='%(asctime)s - %(levelname)s - %(message)s')

app = FastAPI(
    title="IsoCity API",
    description="Isometric building footprint service for conference venue maps",
    version="0.1.0",
)

# ---------------------------------------------------------------------------
# CORS -- allow the Vite dev server
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(venues.router)
app.include_router(buildings.router)


@app.get("/")
async def root():
    return {"status": "ok", "service": "IsoCity API"}

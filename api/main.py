import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from permitrack import __version__
from permitrack.settings import API_DEBUG, LOG_FORMAT, LOG_LEVEL

from .expats import router as expats_router
from .reports import router as reports_router

logging.basicConfig(level="DEBUG" if API_DEBUG else LOG_LEVEL, format=LOG_FORMAT)

app = FastAPI(
    title="permitrack API",
    version=__version__,
    description="HTTP layer over the ExpatRegistry: permits, processes, checklists and reminders.",
)

# --- CORS ----------------------------------------------------------
# Dev front‑end origins; tighten for production.
origins = [
    "http://localhost:5173",    # Vite dev server default port
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)

# --- Include Routers ----------------------------------------------------------
app.include_router(expats_router)
app.include_router(reports_router)


# ---------- health-check ----------
@app.get("/")
def root():
    return {"status": "ok", "msg": "permitrack API is alive"}

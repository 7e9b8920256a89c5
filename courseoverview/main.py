import logging

from fastapi import FastAPI

from courseoverview.core.logging_middleware import LoggingMiddleware
from courseoverview.db.init_db import init_db
from courseoverview.routers.auth import router as auth_router
from courseoverview.routers.dashboard import router as dashboard_router

logging.basicConfig(level=logging.INFO)

app = FastAPI(title="Course Overview")

# Middleware
app.add_middleware(LoggingMiddleware)


# Health check
@app.get("/health")
def health():
    return {"status": "ok"}


# Startup event
@app.on_event("startup")
def on_startup():
    init_db()


# Include routers
app.include_router(auth_router, prefix="/auth", tags=["auth"])

# Dashboard hook routes define their full paths
app.include_router(dashboard_router, tags=["courseoverview"])

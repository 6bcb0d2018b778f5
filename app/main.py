import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api.routes import index
from app.api.routes import auth
from app.api.routes import users
from app.api.routes import fittings
from app.api.routes import qr_codes
from app.api.routes import inspections
from app.api.routes import maintenance
from app.api.routes import analytics
from app.api.routes import external


from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.core.logging import setup_logging

setup_logging()

app = FastAPI(title=settings.app_name, version=settings.app_version)

# Middlewares
origins = []

if settings.allowed_hosts:
    origins = settings.allowed_hosts.split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Register routes
app.include_router(index.router, prefix="/api")
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(
    fittings.router, prefix="/api/fittings", tags=["Track Fittings"])
app.include_router(qr_codes.router, prefix="/api/qr-codes", tags=["QR Codes"])
app.include_router(
    inspections.router, prefix="/api/inspections", tags=["Inspections"])
app.include_router(
    maintenance.router, prefix="/api/maintenance", tags=["Maintenance"])
app.include_router(analytics.router, prefix="/api", tags=["Analytics"])
app.include_router(
    external.router, prefix="/api/external", tags=["External Systems"])

# Static files serving (generated QR images)
app.mount("/static", StaticFiles(directory=settings.static_dir), name="static")

if __name__ == "__main__":
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
        log_level=None,
    )

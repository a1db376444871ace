from fastapi import FastAPI

from shipspace.api.errors import install_error_handlers
from shipspace.api.v1.router import router as v1_router
from shipspace.core.telemetry import setup_logging, setup_telemetry

setup_logging()

app = FastAPI(title="Shipspace API", version="0.1.0")

install_error_handlers(app)
setup_telemetry(app)
app.include_router(v1_router)

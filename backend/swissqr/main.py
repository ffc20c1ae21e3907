from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from swissqr.core.config import settings
from swissqr.core.logging_config import configure_logging
from swissqr.routes import (
    health,
    qr_bill,
)

configure_logging()

app = FastAPI(title="Swiss QR-Bill Backend")

origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

app.include_router(health.router, prefix=settings.API_V1_STR)
app.include_router(qr_bill.router, prefix=settings.API_V1_STR)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)

# bowlscan/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bowlscan.config import get_settings
from bowlscan.middleware_logging import configure_logging, register_request_logging
from bowlscan.error_handlers import register_error_handlers
from bowlscan.routers import health, ocr_api

settings = get_settings()
configure_logging(settings.LOG_LEVEL)

# =========================
# ---- App Init ----
# =========================
app = FastAPI(title="Bowlscan Scoreboard OCR", version="0.1.0")
register_request_logging(app)
register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(ocr_api.router)


@app.get("/")
def root():
    return {"service": "bowlscan", "ok": True}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("bowlscan.main:app", host="0.0.0.0", port=settings.PORT, reload=False)

import logging
from fastapi import FastAPI
from app.core.config import settings
from app.core.logging_config import setup_logging
from app.db.database import init_db
from app.api.routes import router as chat_router

logger = logging.getLogger("app.main")

# Initialize FastAPI (Swagger UI disabled, the UI ships separately)
app = FastAPI(
    title="Synapse",
    docs_url=None,
    redoc_url=None
)

# Startup Event to configure logging and initialize DB
@app.on_event("startup")
async def startup_event():
    setup_logging(settings.LOG_LEVEL)
    await init_db()
    logger.info("Synapse backend initialized, fallback order: %s", ", ".join(settings.FALLBACK_MODELS))

# Mount API Router
app.include_router(chat_router, prefix="/api")

@app.get("/")
async def root():
    return {"status": "Backend running successfully!"}

if __name__ == "__main__":
    import uvicorn
    # Run the server
    uvicorn.run("main:app", host="0.0.0.0", port=8080, reload=True)

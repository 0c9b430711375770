from fastapi import FastAPI
from middlewares.logger_middleware import LoggingMiddleware
from middlewares.trace_id_middleware import TraceIDMiddleware
from api.v1.routes.scraper_router import router as scraper_router

from core.config import settings
from utils.logging import RUNTIME, setup_logger

logger = setup_logger(__name__)


app = FastAPI(
    title="Vacancy Scraper API",
    version="1.0.0"
)

#Added logging middleware
app.add_middleware(LoggingMiddleware)

#Trace ID middleware
app.add_middleware(TraceIDMiddleware)

app.include_router(scraper_router)


if __name__ == "__main__":
    import uvicorn

    logger.info(
        "Vacancy scraper listening",
        extra={"operation": str(RUNTIME.STARTUP), "host": settings.HOST, "port": settings.PORT},
    )
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)

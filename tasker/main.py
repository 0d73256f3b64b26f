import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from tasker.core.config import settings
from tasker.core.database import engine, Base
from tasker.core.errors import StoreError, TaskerError
from tasker.routers import health, todos, categories

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

# Init DB
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Tasker API",
    version="0.1.0"
)


@app.exception_handler(TaskerError)
def tasker_error_handler(request: Request, exc: TaskerError):
    detail = exc.message
    if isinstance(exc, StoreError):
        # pas de détails du store côté client
        detail = "internal server error"
    return JSONResponse(status_code=exc.status_code, content={"detail": detail, "code": exc.code})


# Routes
app.include_router(health.router, prefix="/health")
app.include_router(todos.router)
app.include_router(categories.router)

# assignment_portal/main.py
from contextlib import asynccontextmanager
import logging
import sys
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorClient

from assignment_portal.core.config import settings
from assignment_portal.core.errors import StorageFailure, ValidationFailed
from assignment_portal.database.mongo_assignment import MongoAssignmentRepository
from assignment_portal.database.mongo_submission import MongoSubmissionRepository
from assignment_portal.routers.v1 import health
from assignment_portal.routers.v1 import assignment
from assignment_portal.routers.v1 import submission

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s :: %(message)s",
    stream=sys.stdout,
)

logger = logging.getLogger("portal.app")


async def storage_failure_handler(request: Request, exc: StorageFailure):
    logger.exception(
        "Errore di storage su %s %s (%s)", request.method, request.url.path, exc.operation, exc_info=exc
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": {"kind": exc.kind, "message": exc.message}},
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        messages.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg"))
    failure = ValidationFailed(errors=messages)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": failure.to_dict()})


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = AsyncIOMotorClient(
            settings.mongo_uri,
            uuidRepresentation="standard",
            tz_aware=True,
            serverSelectionTimeoutMS=settings.mongo_server_selection_timeout_ms,
            socketTimeoutMS=settings.mongo_socket_timeout_ms,
        )
        db = client[settings.mongo_db_name]
        assignment_repo = MongoAssignmentRepository(db)
        submission_repo = MongoSubmissionRepository(db)
        await assignment_repo.ensure_indexes()
        await submission_repo.ensure_indexes()
        app.state.assignment_repo = assignment_repo   # repo disponibili alle routes
        app.state.submission_repo = submission_repo
        logger.info("Connesso a MongoDB (%s)", settings.mongo_db_name)

        try:
            yield
        finally:
            client.close()
            logger.info("Connessione MongoDB chiusa")

    app = FastAPI(
        title="Assignment Portal",
        description="Microservizio per la gestione di assignment e submission",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins, allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"],
    )

    app.add_exception_handler(StorageFailure, storage_failure_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(health.router,     prefix="/api/v1", tags=["health"])
    app.include_router(assignment.router, prefix="/api/v1", tags=["assignments"])
    app.include_router(submission.router, prefix="/api/v1", tags=["submissions"])
    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("assignment_portal.main:app", host="0.0.0.0", port=8000)

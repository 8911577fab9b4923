import logging

from fastapi import FastAPI, Request, status
from contextlib import asynccontextmanager
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from HomeCareAPI.config import CORS_ALLOW_ORIGINS
from HomeCareAPI.database import engine, Base
from HomeCareAPI.routes import (
    users_router,
    properties_router,
    access_router,
    tasks_router,
    recurring_tasks_router,
    logs_router,
    documents_router,
    appliances_router,
    warranties_router,
    checklists_router,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup logic
    logger.info("App startup event")
    yield
    # Shutdown logic
    logger.info("App shutdown event")


app = FastAPI(title="HomeCare API", lifespan=lifespan)

# Create all the tables in the database (make sure models are imported)
Base.metadata.create_all(bind=engine)


# Malformed request bodies are client errors, reported as 400 rather than 422
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


# Include the auth routes
app.include_router(users_router)

# Include the property routes
app.include_router(properties_router)

# Include the sharing and access routes
app.include_router(access_router)

# Include the planned task routes
app.include_router(tasks_router)

# Include the recurring task routes
app.include_router(recurring_tasks_router)

# Include the maintenance log routes
app.include_router(logs_router)

# Include the document routes
app.include_router(documents_router)

# Include the appliance routes
app.include_router(appliances_router)

# Include the warranty routes
app.include_router(warranties_router)

# Include the seasonal checklist routes
app.include_router(checklists_router)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Root endpoint for testing
@app.get("/")
def read_root():
    return {"message": "Welcome to the HomeCare API"}


@app.get("/health")
def health():
    return {"status": "ok"}


# Run the application (for development)
if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    uvicorn.run("HomeCareAPI.main:app", host="0.0.0.0", port=8000, log_level="debug")

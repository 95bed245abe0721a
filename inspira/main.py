import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from inspira import config
from inspira.admin.router import router as admin_router
from inspira.assignments.router import router as assignments_router
from inspira.courses.router import router as courses_router
from inspira.database import close_client, create_indexes, get_database
from inspira.errors import InspiraError, validation_error_from
from inspira.learners.router import router as learners_router
from inspira.progress.router import router as progress_router
from inspira.system.health_router import router as health_router

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Inspira Learning API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    await create_indexes(get_database())


@app.on_event("shutdown")
async def shutdown_event():
    close_client()


# ==================== ERROR BOUNDARY ====================

@app.exception_handler(InspiraError)
async def inspira_error_handler(request: Request, exc: InspiraError):
    if exc.status_code < 500:
        logger.warning("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    error = validation_error_from(exc.errors())
    logger.warning("%s %s -> invalid field %s", request.method, request.url.path, error.field)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error", "field": None})


# ==================== ROUTER REGISTRATION ====================
app.include_router(health_router)
app.include_router(courses_router)
app.include_router(learners_router)
app.include_router(progress_router)
app.include_router(assignments_router)
app.include_router(admin_router)


@app.get("/")
def read_root():
    return {"message": "Inspira API is running"}

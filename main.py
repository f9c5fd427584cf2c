from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
import models  # noqa: F401  registers every table
from database import Base, engine
from routes import auth, trips, comments, wishlist
from utils.logger import setup_api_logger

Base.metadata.create_all(bind=engine)

app = FastAPI(title="TravelBuddy API (Auth, Trips, Comments, Wishlist)")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# setup file logger for API failures
api_logger = setup_api_logger()


def _validation_errors(exc: RequestValidationError) -> list:
    errors = []
    for err in exc.errors():
        # drop the "body" / "query" / "path" prefix
        loc = [str(part) for part in err.get("loc", ())[1:]]
        message = err.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append({"field": ".".join(loc), "message": message})
    return errors


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = _validation_errors(exc)
    api_logger.info("Validation failed on %s %s | errors=%s", request.method, request.url.path, errors)
    return JSONResponse(status_code=400, content={"message": "Validation failed", "errors": errors})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail
    if exc.status_code == 404 and message == "Not Found":
        # no route matched
        message = "Route not found"
    api_logger.warning("HTTPException on %s %s | status=%s | detail=%s",
                       request.method, request.url.path, exc.status_code, message)
    return JSONResponse(status_code=exc.status_code, content={"message": message},
                        headers=getattr(exc, "headers", None))


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    api_logger.warning("IntegrityError on %s %s | %s", request.method, request.url.path, exc.orig)
    return JSONResponse(status_code=409, content={"message": "Resource already exists"})


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    api_logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    content = {"message": "Something went wrong!"}
    if config.is_development():
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)


@app.get("/health", tags=["Health"])
def health():
    return {
        "status": "OK",
        "message": "TravelBuddy API is running!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


app.include_router(auth.router, prefix=config.API_PREFIX)
app.include_router(trips.router, prefix=config.API_PREFIX)
app.include_router(comments.router, prefix=config.API_PREFIX)
app.include_router(wishlist.router, prefix=config.API_PREFIX)


if __name__ == "__main__":
    import os
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", 8000)))

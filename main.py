# main.py
import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import get_settings
from containers import container
from db import init_db
from services.chat_service import drain_reply_tasks

from endpoints.api_chats import router as api_chats_router
from endpoints.api_messages import router as api_messages_router
from endpoints.chat_stream import router as chat_stream_router
from endpoints.web_pages import router as web_pages_router

# modules that use @inject
import endpoints.utils as utils_module
import endpoints.api_chats as api_chats_module
import endpoints.api_messages as api_messages_module
import endpoints.chat_stream as chat_stream_module
import endpoints.web_pages as web_pages_module

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="[%(asctime)s] %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger("synthik")

BASE_DIR = Path(__file__).resolve().parent


@asynccontextmanager
async def lifespan(app: FastAPI):
    engine = container.engine()
    await init_db(engine)
    logger.info("Database ready, model %s at %s", settings.ollama_model, settings.ollama_base_url)
    yield
    # let replies still streaming from the model finish saving
    await drain_reply_tasks()
    await engine.dispose()


app = FastAPI(title="SYNTHik Chat", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# @inject works only in wired modules
container.wire(modules=[
    utils_module,
    api_chats_module,
    api_messages_module,
    chat_stream_module,
    web_pages_module,
])


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    message = "Invalid messages format" if request.url.path == "/api/chat" else "Invalid request"
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse({"error": message}, status_code=400)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse({"error": "Internal Server Error"}, status_code=500)


@app.get("/health")
async def health():
    return {"status": "ok", "env": settings.env}


app.include_router(api_chats_router)
app.include_router(api_messages_router)
app.include_router(chat_stream_router)
app.include_router(web_pages_router)

app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")


if __name__ == "__main__":
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=False)

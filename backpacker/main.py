import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

# Load OPENAI_* / WIKIPEDIA_* settings from .env before anything reads the environment.
load_dotenv()
# Configure logging before importing modules that may log at import time.
logging.basicConfig(level=logging.INFO)

from backpacker.agents.autogen_config import MISSING_CREDENTIALS_MESSAGE, has_credentials  # noqa: E402
from backpacker.api.routes import router  # noqa: E402

app = FastAPI(title="backpacker-ai", version="0.1.0")
app.include_router(router)
logger = logging.getLogger(__name__)


@app.on_event("startup")
async def _startup() -> None:
    if not has_credentials():
        logger.warning(MISSING_CREDENTIALS_MESSAGE.replace("\n", " "))


@app.get("/")
async def _root() -> RedirectResponse:
    return RedirectResponse(url="/docs")


@app.get("/info")
async def info() -> dict[str, object]:
    ready = has_credentials()
    return {
        "name": "backpacker-ai",
        "version": "0.1.0",
        "ready": ready,
        "message": "" if ready else MISSING_CREDENTIALS_MESSAGE,
    }

from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.templating import Jinja2Templates
from fastapi.responses import HTMLResponse
from app.config import settings
from app.database import init_db
from app.routers import auth_router, diagrams_router, editor_router
from app.services.catalog import EXAMPLE_PROMPTS, EXAMPLES
from app.services.credential_service import CredentialHolder
from app.services.editor_service import EditorSession
from app.services.generation_service import GenerationClient
from app.utils.logging_config import setup_logging, fastapi_logger
from app.error_handlers import register_exception_handlers
from app.middleware import RequestLoggingMiddleware

TEMPLATES_DIR = Path(__file__).parent / "templates"


def build_editor(credentials: CredentialHolder) -> EditorSession:
    client = GenerationClient(credentials)
    return EditorSession(client, debounce=settings.render_debounce_seconds)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging()
    fastapi_logger.info(f"Starting {settings.APP_NAME}")
    await init_db()
    fastapi_logger.info("Database initialized")

    credentials = CredentialHolder(settings.CREDENTIAL_STORE_PATH, settings.CREDENTIAL_KEY_NAME)
    credentials.load()
    app.state.credentials = credentials
    app.state.editor = build_editor(credentials)
    yield
    # Shutdown
    app.state.editor.scheduler.cancel()
    fastapi_logger.info("Shutting down application")


app = FastAPI(
    title=settings.APP_NAME,
    description="AI-assisted Mermaid diagram editor",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

# API Routers
app.include_router(auth_router)
app.include_router(diagrams_router)
app.include_router(editor_router)


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": settings.APP_NAME}


# Frontend Routes
@app.get("/", response_class=HTMLResponse)
async def index(request: Request):
    return templates.TemplateResponse(request, "index.html", {
        "app_name": settings.APP_NAME,
        "examples": EXAMPLES,
        "example_prompts": EXAMPLE_PROMPTS,
        "render_debounce_ms": settings.RENDER_DEBOUNCE_MS,
    })


@app.get("/pricing", response_class=HTMLResponse)
async def pricing(request: Request):
    return templates.TemplateResponse(request, "pricing.html", {"app_name": settings.APP_NAME})


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)

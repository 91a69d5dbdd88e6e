from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from invoice.connections.database import close_db_pool
from contextlib import asynccontextmanager
from dotenv import load_dotenv

from invoice.logging.utils import initialize_logging, get_app_logger
from invoice.middlewares.logging_middleware import AuditMiddleware

load_dotenv()

# Initialize Sentry (must be done early, before other imports)
from invoice.config.sentry import init_sentry
init_sentry()

# Initialize structured logging
initialize_logging()
logger = get_app_logger('invoice.main')

from invoice.config.settings import InvoiceConfigs
configs = InvoiceConfigs()

# Debug mode detection (DEBUG=false means production)
DEBUG = configs.DEBUG

logger.info(f"Running in {'debug' if DEBUG else 'production'} mode with profiles {configs.APPLICATION_PROFILES}")

# Method entry/exit logging, dev profile only
from invoice.aop.logging_aspect import logging_aspect_configuration
logging_aspect_configuration(configs)


@asynccontextmanager
async def lifespan(_: FastAPI):
    logger.info(f"Starting {configs.APP_NAME} service")
    yield
    logger.info(f"Shutting down {configs.APP_NAME} service")
    close_db_pool()

# Disable docs in production (when DEBUG=false)
docs_url = "/docs" if DEBUG else None
redoc_url = "/redoc" if DEBUG else None

app = FastAPI(
    title="Invoice Service",
    version=configs.APP_VERSION,
    lifespan=lifespan,
    docs_url=docs_url,
    redoc_url=redoc_url
)

if configs.ALLOWED_ORIGINS:
    origins = [origin.strip() for origin in configs.ALLOWED_ORIGINS.split(",")]
else:
    origins = ["*"]

# Request/Audit logging middleware (place early)
app.add_middleware(AuditMiddleware)

logger.info(f"Configuring CORS with allowed origins: {origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Location", "Link", "X-Total-Count", "X-Request-ID",
                    f"X-{configs.CLIENT_APP_NAME}-alert",
                    f"X-{configs.CLIENT_APP_NAME}-error",
                    f"X-{configs.CLIENT_APP_NAME}-params"],
)

# Register custom exception handlers
from invoice.middlewares.handlers import register_exception_handlers
register_exception_handlers(app)


# Routes
from invoice.routes.api import api_router
from invoice.routes.health import router as health_router

app.include_router(api_router, prefix="/api")
app.include_router(health_router, tags=["health"])

# Recipe Import API Main Entry Point
import logging
import sys
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .settings import settings
from .routers.ready import router as ready_router
from .routers.parse_recipe import router as parse_recipe_router, limiter
from .routers.nutrition import router as nutrition_router

# Configure structured logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("recipe_import")

app = FastAPI(title="Recipe Import API", version="0.1.0")
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

app.include_router(ready_router, prefix="/api", tags=["ready"])
app.include_router(parse_recipe_router, prefix="/api", tags=["recipes"])
app.include_router(nutrition_router, prefix="/api", tags=["nutrition"])

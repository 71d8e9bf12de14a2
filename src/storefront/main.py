import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .config import CORS_ORIGINS
from .logging_config import configure_logging
from .routes.health import router as health_router
from .routes.products import router as products_router
from .routes.fit import router as fit_router
from .routes.orders import router as orders_router
from .routes.account import router as account_router
from .routes.cart import router as cart_router
from .routes.users import router as users_router
from .routes.newsletter import router as newsletter_router

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Storefront Backend")

# Origins come from CORS_ORIGINS; "*" only makes sense for local work
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers (prefixes matter!)
app.include_router(health_router, prefix="/api")
app.include_router(products_router, prefix="/api")
app.include_router(fit_router, prefix="/api")
app.include_router(orders_router, prefix="/api")
app.include_router(account_router, prefix="/api")
app.include_router(cart_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(newsletter_router, prefix="/api")

logger.info("Storefront API ready (CORS origins: %s)", ", ".join(CORS_ORIGINS))

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlmodel import select

from storefront.api import (
    auth_router,
    orders_router,
    reports_router,
    stores_router,
    supply_router,
    users_router,
)
from storefront.core import limiter
from storefront.core import errors
from storefront.core.config import settings
from storefront.core.logging import setup_logging
from storefront.database import create_db_and_tables, session_scope
from storefront.models import Role, User

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    errors.AuthFailed: status.HTTP_401_UNAUTHORIZED,
    errors.Forbidden: status.HTTP_403_FORBIDDEN,
    errors.NotStoreOwner: status.HTTP_403_FORBIDDEN,
    errors.StoreNotFound: status.HTTP_404_NOT_FOUND,
    errors.WarehouseNotFound: status.HTTP_404_NOT_FOUND,
    errors.UserNotFound: status.HTTP_404_NOT_FOUND,
    errors.ProductNotFound: status.HTTP_404_NOT_FOUND,
    errors.InsufficientStock: status.HTTP_409_CONFLICT,
    errors.StoreTooFar: status.HTTP_409_CONFLICT,
    errors.NameTaken: status.HTTP_409_CONFLICT,
    errors.LocationUnavailable: 422,
    errors.InvalidValue: 422,
    errors.PersistenceFailure: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def seed_admin() -> None:
    with session_scope() as session:
        admin = session.exec(select(User).where(User.name == settings.ADMIN_NAME)).first()
        if admin:
            logger.info("Admin user %r exists", admin.name)
            return
        session.add(User(name=settings.ADMIN_NAME, secret=settings.ADMIN_SECRET, role=Role.ADMIN))
        logger.info("Admin user %r created", settings.ADMIN_NAME)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    create_db_and_tables()
    seed_admin()
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# Setup rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Setup CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(errors.StorefrontError)
async def storefront_error_handler(request: Request, exc: errors.StorefrontError):
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return JSONResponse(status_code=status_code, content=exc.to_dict())


# Include routers
app.include_router(auth_router, tags=["Auth"])
app.include_router(users_router, prefix="/users", tags=["Users"])
app.include_router(stores_router, prefix="/stores", tags=["Stores"])
app.include_router(orders_router, prefix="/orders", tags=["Orders"])
app.include_router(supply_router, prefix="/supply-requests", tags=["Supply"])
app.include_router(reports_router, prefix="/reports", tags=["Reports"])


@app.get("/")
def read_root():
    return {"message": f"Welcome to {settings.APP_NAME}"}

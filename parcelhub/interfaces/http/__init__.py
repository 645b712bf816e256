from fastapi import APIRouter

from parcelhub.interfaces.http.routers import auth, orders, packages, wallet


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(auth.router, prefix="/auth", tags=["auth"])
    router.include_router(orders.router, prefix="/orders", tags=["orders"])
    router.include_router(packages.router, prefix="/packages", tags=["packages"])
    router.include_router(wallet.router, prefix="/wallet", tags=["wallet"])
    return router


__all__ = [
    "create_api_router",
]

"""Public endpoint serving stored slide images."""

from fastapi import APIRouter

from ..media.public_media_service import PublicMediaService


def build_public_media_router(service: PublicMediaService, prefix: str = "/uploads") -> APIRouter:
    router = APIRouter(prefix=prefix.rstrip("/"), tags=["public-media"])

    @router.get("/{name}")
    def get_media(name: str):
        return service.open_media(name)

    return router

from fastapi import APIRouter

from catalog.content.api.v1 import (
    chapters,
    characters,
    creators,
    genres,
    series,
    volumes,
)

api_router = APIRouter()
api_router.include_router(series.router, prefix="/series", tags=["Series"])
api_router.include_router(volumes.router, prefix="/volumes", tags=["Volumes"])
api_router.include_router(chapters.router, prefix="/chapters", tags=["Chapters"])
api_router.include_router(genres.router, prefix="/genres", tags=["Genres"])
api_router.include_router(creators.router, prefix="/creators", tags=["Creators"])
api_router.include_router(
    characters.router, prefix="/characters", tags=["Characters"]
)

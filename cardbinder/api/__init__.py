from cardbinder.api.cards import router as cards_router
from cardbinder.api.health import router as health_router
from cardbinder.api.series import router as series_router

__all__ = [
    "cards_router",
    "health_router",
    "series_router",
]

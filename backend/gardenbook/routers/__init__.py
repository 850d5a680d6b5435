from gardenbook.routers.auth import router as auth_router
from gardenbook.routers.categories import router as categories_router
from gardenbook.routers.specimens import fish_router, plants_router

__all__ = ["auth_router", "categories_router", "plants_router", "fish_router"]

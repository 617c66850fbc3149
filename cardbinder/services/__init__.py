from cardbinder.services.catalog_client import CatalogClient
from cardbinder.services.catalog_view import CatalogViewModel, OwnershipFilter
from cardbinder.services.display_style import DisplayStyle, display_style
from cardbinder.services.ownership_sync import OwnershipSync

__all__ = [
    "CatalogClient",
    "CatalogViewModel",
    "DisplayStyle",
    "OwnershipFilter",
    "OwnershipSync",
    "display_style",
]

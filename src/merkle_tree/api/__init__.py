"""
API Package

Service layer, FastAPI application and HTTP client for named Merkle trees.
The FastAPI app is imported lazily from merkle_tree.api.rest_api so that
the client can be used without the server stack loaded.
"""

from .tree_client import TreeAPIClient, TreeAPIError
from .tree_service import TreeService, TreeServiceError

__all__ = [
    'TreeAPIClient',
    'TreeAPIError',
    'TreeService',
    'TreeServiceError',
]

"""
Merkle Tree API Client

This module provides a client for a running Merkle Tree REST API. It maps
transport failures and error responses onto TreeAPIError.
"""

import logging
from typing import Any, Dict, List, Optional

import requests
from requests.utils import quote

from ..config import load_settings
from ..models.api_models import (
    ProofResponse,
    SiblingModel,
    TreeSummary,
    VerifyResponse,
)

logger = logging.getLogger(__name__)


def _segment(name: str) -> str:
    """Percent-encode a tree name for use as a single path segment."""
    return quote(name, safe="")


class TreeAPIError(Exception):
    """Exception raised for Merkle Tree API related errors."""

    def __init__(self, message: str, status_code: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class TreeAPIClient:
    """
    Client for the Merkle Tree REST API.

    Usage:
        client = TreeAPIClient("http://127.0.0.1:8000")
        client.create_tree("audit", ["a", "b", "c"])
        proof = client.get_proof("audit", "a")
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        """
        Initialize the API client.

        Args:
            base_url: Base URL for the API. If None, uses MERKLE_TREE_API_URL.
            timeout: Request timeout in seconds. If None, uses MERKLE_TREE_TIMEOUT.
        """
        settings = load_settings()
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.timeout

        self.session = requests.Session()
        self.session.headers.update({
            'Content-Type': 'application/json',
            'Accept': 'application/json'
        })

        logger.info(f"Initialized TreeAPIClient with base_url: {self.base_url}")

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            logger.debug(f"{method} {url}")
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.ConnectionError as e:
            raise TreeAPIError(
                f"Failed to connect to Merkle Tree API at {self.base_url}. "
                f"Start a server with 'merkle-tree serve' or set MERKLE_TREE_API_URL. "
                f"Original error: {e}"
            )
        except requests.Timeout as e:
            raise TreeAPIError(f"Timeout connecting to Merkle Tree API at {self.base_url}: {e}")
        except requests.RequestException as e:
            raise TreeAPIError(f"Request failed to Merkle Tree API at {self.base_url}. Error: {e}")

        if not response.ok:
            code = None
            message = f"HTTP {response.status_code}"
            try:
                body = response.json()
                code = body.get("code")
                message = body.get("error") or body.get("detail") or message
            except ValueError:
                pass
            raise TreeAPIError(str(message), status_code=response.status_code, code=code)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def health_check(self) -> bool:
        """Return True if the API answers its health endpoint."""
        try:
            data = self._request("GET", "/health")
        except TreeAPIError as e:
            logger.warning(f"Health check failed: {e}")
            return False
        return data.get("status") == "healthy"

    def list_trees(self) -> List[TreeSummary]:
        data = self._request("GET", "/trees")
        return [TreeSummary(**tree) for tree in data.get("trees", [])]

    def create_tree(self, name: str, elements: List[str]) -> TreeSummary:
        data = self._request("POST", "/trees", {"name": name, "elements": list(elements)})
        return TreeSummary(**data)

    def get_tree(self, name: str) -> TreeSummary:
        return TreeSummary(**self._request("GET", f"/trees/{_segment(name)}"))

    def delete_tree(self, name: str) -> None:
        self._request("DELETE", f"/trees/{_segment(name)}")

    def add_elements(self, name: str, elements: List[str]) -> TreeSummary:
        data = self._request("POST", f"/trees/{_segment(name)}/elements", {"elements": list(elements)})
        return TreeSummary(**data)

    def get_proof(self, name: str, element: str) -> ProofResponse:
        data = self._request("POST", f"/trees/{_segment(name)}/proof", {"element": element})
        return ProofResponse(**data)

    def verify(self, name: str, element: str, proof: List[SiblingModel]) -> VerifyResponse:
        payload = {
            "element": element,
            "proof": [step.model_dump(mode="json") for step in proof],
        }
        return VerifyResponse(**self._request("POST", f"/trees/{_segment(name)}/verify", payload))

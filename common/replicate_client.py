"""Thin HTTP client for the Replicate predictions API.

Only the two calls the gateway needs: create a prediction and read one back.
Errors are not translated here; requests exceptions propagate to the caller.
"""
import logging
from typing import Any, Dict, Optional

import requests

from common.config import REPLICATE_API_BASE, REPLICATE_TIMEOUT

logger = logging.getLogger(__name__)


def is_model_reference(version: str) -> bool:
    """True for "owner/model" references, False for version hashes."""
    return "/" in version and ":" not in version


class ReplicateClient:
    def __init__(
        self,
        api_token: str,
        base_url: str = REPLICATE_API_BASE,
        timeout: float = REPLICATE_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {api_token}",
            "Content-Type": "application/json",
            # Job status changes between calls; never serve a cached body
            "Cache-Control": "no-store",
        })

    def create_prediction(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        body = dict(payload)
        version = body.get("version", "")
        if is_model_reference(version):
            # Official models are addressed by name instead of a version hash
            body.pop("version")
            url = f"{self.base_url}/models/{version}/predictions"
        else:
            url = f"{self.base_url}/predictions"

        logger.debug(f"POST {url}")
        resp = self.session.post(url, json=body, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def get_prediction(self, prediction_id: str) -> Dict[str, Any]:
        url = f"{self.base_url}/predictions/{prediction_id}"
        logger.debug(f"GET {url}")
        resp = self.session.get(url, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

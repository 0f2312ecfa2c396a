"""Region-keyed AWS client factory."""

from __future__ import annotations

import logging
import threading
from typing import Any

import boto3
from botocore.config import Config

logger = logging.getLogger(__name__)


class ClientFactory:
    """Creates and caches one boto3 client per service and region.

    boto3 clients are thread safe once created, so a single instance per
    region is shared by every reconciliation running against that region.
    """

    def __init__(self, session: boto3.session.Session | None = None, config: Config | None = None) -> None:
        """Initialize the factory.

        Args:
            session: Optional boto3 session (defaults to a new session using the default credential chain)
            config: Optional botocore client configuration
        """
        self._session = session or boto3.session.Session()
        self._config = config or Config(
            signature_version="s3v4",
            retries={"max_attempts": 5, "mode": "standard"},
        )
        self._clients: dict[tuple[str, str | None], Any] = {}
        self._lock = threading.Lock()

    def _get(self, service: str, region: str | None) -> Any:
        key = (service, region)
        with self._lock:
            client = self._clients.get(key)
            if client is None:
                logger.info(f"Creating {service} client for region {region or 'default'}")
                client = self._session.client(service, region_name=region, config=self._config)
                self._clients[key] = client
            return client

    def s3(self, region: str) -> Any:
        """Get the S3 client for a region."""
        return self._get("s3", region)

    def kms(self, region: str) -> Any:
        """Get the KMS client for a region."""
        return self._get("kms", region)

    def sts(self) -> Any:
        """Get the STS client of the default region."""
        return self._get("sts", None)

    def account_id(self) -> str:
        """Return the account id of the current credentials."""
        return self.sts().get_caller_identity()["Account"]

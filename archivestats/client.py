"""
archivestats Client - Connection to a LauraDB-compatible document store
"""
import logging
import math
import time
from typing import Dict, Any, Optional, List
from urllib.parse import urljoin, urlparse

import requests

from .errors import ConfigurationError, ConnectionFailure, QueryExecutionError

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {"http": 80, "https": 443}


class Client:
    """
    Read-only client for the document store HTTP API.

    Args:
        host: Server hostname or IP address (default: 'localhost')
        port: Server port (default: 8080)
        https: Use HTTPS instead of HTTP (default: False)
        timeout: Request timeout in seconds (default: 30)
        max_connections: Maximum number of connections in the pool (default: 10)
        database: Database name, used to qualify collection names in logs

    Example:
        >>> client = Client(host='localhost', port=8080)
        >>> client.ping()
        True
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 8080,
        https: bool = False,
        timeout: float = 30,
        max_connections: int = 10,
        database: str = "local",
    ):
        if timeout is not None and (not math.isfinite(timeout) or timeout <= 0):
            raise ConfigurationError(f"timeout must be positive, got {timeout!r}")

        self.host = host
        self.port = port
        self.https = https
        self.timeout = timeout
        self.database = database

        protocol = "https" if https else "http"
        self.base_url = f"{protocol}://{host}:{port}"

        self.session = requests.Session()
        adapter = requests.adapters.HTTPAdapter(
            pool_connections=max_connections,
            pool_maxsize=max_connections,
            max_retries=0,
        )
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": "archivestats/1.0.0",
        })

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "Client":
        """
        Create a client from a connection string.

        Args:
            url: Server URL, e.g. 'http://localhost:8080'
            **kwargs: Additional client options (timeout, database, ...)

        Returns:
            Client: configured client

        Raises:
            ConfigurationError: If the URL has no host, an unsupported scheme,
                credentials, or anything after the port

        Example:
            >>> client = Client.from_url('https://db.example.com:8443', database='archive')
        """
        parsed = urlparse(url)
        if parsed.scheme not in DEFAULT_PORTS or not parsed.hostname:
            raise ConfigurationError(f"Invalid store URL: {url!r}")
        # The API lives at the server root and takes no credentials
        if parsed.username is not None or parsed.password is not None:
            raise ConfigurationError(f"Credentials are not supported in the store URL for {parsed.hostname!r}")
        if parsed.path not in ("", "/") or parsed.params or parsed.query or parsed.fragment:
            raise ConfigurationError(f"Store URL must not have a path or query: {url!r}")

        try:
            port = parsed.port or DEFAULT_PORTS[parsed.scheme]
        except ValueError as e:
            raise ConfigurationError(f"Invalid port in store URL: {url!r}") from e

        return cls(
            host=parsed.hostname,
            port=port,
            https=parsed.scheme == "https",
            **kwargs,
        )

    def _request(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Perform an HTTP request to the store.

        Args:
            method: HTTP method (GET, POST)
            path: Request path (relative to base URL)
            body: Request body (will be JSON encoded)
            params: URL query parameters

        Returns:
            API response as dictionary

        Raises:
            ConnectionFailure: If the server cannot be reached
            QueryExecutionError: If the server answers with an error
        """
        url = urljoin(self.base_url, path)
        logger.debug("Command started %s %s %s", method, path, body)
        started = time.perf_counter()

        try:
            response = self.session.request(
                method=method,
                url=url,
                json=body,
                params=params,
                timeout=self.timeout,
            )
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            logger.debug("Command failed %s %s: %s", method, path, e)
            raise ConnectionFailure(f"Cannot reach store at {self.base_url}: {e}") from e
        except requests.exceptions.RequestException as e:
            raise QueryExecutionError(f"HTTP request failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.status_code >= 400 or not data.get("ok", False):
            error_msg = data.get("message") or data.get("error") or response.reason or "API request failed"
            logger.debug("Command failed %s %s: %s", method, path, error_msg)
            raise QueryExecutionError(
                f"Store error: {error_msg}",
                status_code=response.status_code,
                details=data,
            )

        logger.debug(
            "Command succeeded %s %s %.4f ms",
            method,
            path,
            (time.perf_counter() - started) * 1000,
        )
        return data

    def ping(self) -> bool:
        """
        Check if the server is reachable and responding.

        Returns:
            True if server is reachable, False otherwise
        """
        try:
            response = self._request("GET", "/ping")
            return response.get("ok", False)
        except (ConnectionFailure, QueryExecutionError):
            return False

    def list_collections(self) -> List[str]:
        """
        List all collections in the database.

        Returns:
            List of collection names
        """
        response = self._request("GET", "/collections")
        return response.get("result", {}).get("collections", [])

    def collection(self, name: str) -> "Collection":
        """
        Get a collection object for running queries.

        Args:
            name: Collection name

        Returns:
            Collection object

        Example:
            >>> entries = client.collection('ArchiveEntry')
            >>> entries.count()
        """
        from .collection import Collection
        return Collection(self, name)

    def close(self):
        """Close the client and release resources."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"Client(host='{self.host}', port={self.port}, database='{self.database}')"

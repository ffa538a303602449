"""Async UniFi controller API client used as the telemetry source.

Authenticates with an API key sent in the X-API-KEY header and returns the
`data` list of the controller's `{meta, data}` envelope.
"""

import httpx
from loguru import logger
from typing import Any
from unifi_monitor.models import ResourceKind
from unifi_monitor.utils.errors import ConfigurationError, ErrorCodes, SourceError
from unifi_monitor.utils.settings import Settings


class UniFiClient:
    """Async UniFi controller API client.

    The HTTP client is created lazily so an unconfigured client can be
    constructed and only fails, with ConfigurationError, when it fetches.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize UniFi client.

        Args:
            settings: Connection settings (loaded from the environment if omitted)
            transport: Optional httpx transport, used by tests
        """
        self._settings = settings if settings is not None else Settings.from_env()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> 'UniFiClient':
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def is_configured(self) -> bool:
        """Check if endpoint and API key are set."""
        return self._settings.is_configured

    def _ensure_client(self) -> httpx.AsyncClient:
        if not self._settings.is_configured:
            missing = [
                name
                for name, value in (
                    ('UNIFI_API_URL', self._settings.api_url),
                    ('UNIFI_API_KEY', self._settings.api_key),
                )
                if not value
            ]
            raise ConfigurationError(f'UniFi API not configured: missing {", ".join(missing)}')

        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._settings.api_url,
                verify=self._settings.verify_ssl,
                timeout=httpx.Timeout(self._settings.timeout),
                headers={
                    'X-API-KEY': self._settings.api_key,
                    'Content-Type': 'application/json',
                },
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch(self, kind: ResourceKind) -> list[dict[str, Any]]:
        """Fetch one resource list from the controller.

        Args:
            kind: Resource to fetch (devices or clients)

        Returns:
            The controller's `data` list

        Raises:
            ConfigurationError: If URL or API key is not set
            SourceError: For HTTP errors, transport failures, timeouts or
                         malformed responses
        """
        client = self._ensure_client()
        path = kind.path
        logger.debug(f'Fetching {path} from controller')

        try:
            response = await client.get(f'/{path}')
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status in (401, 403):
                raise SourceError(
                    message=f'HTTP {status}: controller rejected the API key',
                    error_code=ErrorCodes.AUTHENTICATION_FAILED,
                    suggestion='Check UNIFI_API_KEY and its permissions',
                    status_code=status,
                ) from e
            raise SourceError(
                message=f'UniFi API error: {status} {e.response.reason_phrase}',
                error_code=ErrorCodes.API_ERROR,
                status_code=status,
            ) from e
        except httpx.TimeoutException as e:
            raise SourceError(
                message=f'Request to {path} timed out',
                error_code=ErrorCodes.TIMEOUT,
                suggestion='Check controller load or raise UNIFI_TIMEOUT',
            ) from e
        except httpx.RequestError as e:
            raise SourceError(
                message=f'Request failed: {e}',
                error_code=ErrorCodes.CONTROLLER_UNREACHABLE,
                suggestion='Check network connectivity and controller status',
            ) from e
        except ValueError as e:
            raise SourceError(
                message=f'Controller returned invalid JSON for {path}',
                error_code=ErrorCodes.INVALID_RESPONSE,
            ) from e

        return self._unwrap(payload, path)

    @staticmethod
    def _unwrap(payload: Any, path: str) -> list[dict[str, Any]]:
        """Extract the data list from the controller envelope."""
        if isinstance(payload, dict):
            meta = payload.get('meta')
            if isinstance(meta, dict) and meta.get('rc') == 'error':
                raise SourceError(
                    message=f'UniFi API error: {meta.get("msg", "Unknown API error")}',
                    error_code=ErrorCodes.API_ERROR,
                )
            payload = payload.get('data', [])

        if not isinstance(payload, list):
            raise SourceError(
                message=f'Unexpected payload shape for {path}: {type(payload).__name__}',
                error_code=ErrorCodes.INVALID_RESPONSE,
            )

        return [item for item in payload if isinstance(item, dict)]

    async def get_devices(self) -> list[dict[str, Any]]:
        """Get all devices from the UniFi controller."""
        return await self.fetch(ResourceKind.DEVICES)

    async def get_clients(self) -> list[dict[str, Any]]:
        """Get all known clients from the UniFi controller."""
        return await self.fetch(ResourceKind.CLIENTS)

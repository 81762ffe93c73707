"""Base client for the Rollbar API with shared auth and envelope decoding.

Every Rollbar response body is wrapped in an envelope::

    {"err": 0, "result": {...}}
    {"err": 1, "message": "Invalid access token"}

``RollbarClient._get_result`` is the single path through which endpoint
calls pass. It issues one authenticated GET, checks the HTTP status and the
envelope, and hands the ``result`` payload to a caller-supplied parser.
Failures raise exceptions from ``rollbar_tools.core.exceptions`` tagged with
the operation label. Nothing is retried.

Example:
    from rollbar_tools.rollbar.base import RollbarClient

    class DeployClient(RollbarClient):
        def get_deploy(self, deploy_id: int) -> dict:
            return self._get_result(f"/deploy/{deploy_id}", "deploy", dict)
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

import requests
from pydantic import ValidationError as PydanticValidationError

from rollbar_tools.core.exceptions import (
    AuthenticationError,
    DecodeError,
    MissingResultError,
    NotFoundError,
    RollbarError,
    ServiceError,
    StatusError,
    TransportError,
)
from rollbar_tools.core.models import Envelope
from rollbar_tools.core.redact import redact_value
from rollbar_tools.rollbar.credentials import (
    DEFAULT_SERVICE,
    RollbarCredentials,
    get_credentials,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Default configuration
DEFAULT_BASE_URL = "https://api.rollbar.com/api/1"
DEFAULT_TIMEOUT = 8  # seconds
ACCESS_TOKEN_HEADER = "X-Rollbar-Access-Token"  # noqa: S105
UNKNOWN_ERROR_MESSAGE = "unknown error from Rollbar"
MAX_ERROR_BODY = 2048  # characters of a failed response body kept in the error


class RollbarClient:
    """Base HTTP client for the Rollbar API.

    The access token is attached to the session once, at construction, and
    the session headers are not touched afterwards. The client keeps no
    per-call state, so one instance can serve concurrent calls.

    Attributes:
        base_url: API base URL
        project: Project the token belongs to, when known
        timeout: Request timeout in seconds, passed to requests
    """

    def __init__(
        self,
        access_token: str | None = None,
        project: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        service: str | None = None,
    ) -> None:
        """Initialize the Rollbar client.

        Args:
            access_token: Project access token (resolved from env/keyring if omitted)
            project: Project name for keyring lookup
            base_url: API base URL
            timeout: Request timeout in seconds
            service: Keyring service name for credential lookup
        """
        creds = get_credentials(
            project=project,
            access_token=access_token,
            service=service or DEFAULT_SERVICE,
        )
        self._credentials: RollbarCredentials = creds
        self.project = creds.project
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/json",
                ACCESS_TOKEN_HEADER: creds.access_token,
            }
        )

        logger.debug(
            "Initialized Rollbar client for %s (project: %s)",
            self.base_url,
            self.project or "unknown",
        )

    def __enter__(self) -> "RollbarClient":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit - close session."""
        self.close()

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()
        logger.debug("Closed Rollbar client session")

    def _request(
        self,
        path: str,
        operation: str,
        params: dict[str, Any] | None = None,
    ) -> requests.Response:
        """Make a single GET request.

        Args:
            path: API path (appended to base_url)
            operation: Operation label for error messages
            params: Query parameters

        Returns:
            Response object with a 2xx status

        Raises:
            TransportError: If the request could not be completed
            AuthenticationError: If the token is rejected (401/403)
            NotFoundError: If the resource does not exist (404)
            StatusError: For any other non-2xx status
        """
        url = f"{self.base_url}{path}"
        logger.debug("GET %s", url)

        try:
            response = self._session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise TransportError(
                self.redact(f"request failed: {e}"),
                operation=operation,
                details={"url": url},
            ) from e

        logger.debug(
            "GET %s -> %d (%d bytes)",
            path,
            response.status_code,
            len(response.content),
        )

        if 200 <= response.status_code < 300:
            return response

        excerpt = self.redact(response.text[:MAX_ERROR_BODY].strip())
        message = f"non-success status {response.status_code}"
        if excerpt:
            message = f"{message}: {excerpt}"
        details = {"url": url, "response": excerpt}

        if response.status_code in (401, 403):
            raise AuthenticationError(
                message, status_code=response.status_code, operation=operation, details=details
            )
        if response.status_code == 404:
            raise NotFoundError(message, status_code=404, operation=operation, details=details)
        raise StatusError(
            message, status_code=response.status_code, operation=operation, details=details
        )

    def _get_result(
        self,
        path: str,
        operation: str,
        parse: Callable[[Any], T],
        params: dict[str, Any] | None = None,
    ) -> T:
        """GET path, unwrap the envelope and parse its result.

        Args:
            path: API path
            operation: Operation label for error messages
            parse: Callable turning the raw result payload into T
            params: Query parameters

        Returns:
            Whatever parse returns for the result payload

        Raises:
            DecodeError: If the body or payload does not have the expected shape
            ServiceError: If the envelope reports err != 0
            MissingResultError: If the envelope reports success without a result
        """
        response = self._request(path, operation, params=params)

        try:
            envelope = Envelope.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            raise DecodeError(
                self.redact(f"decode envelope: {e}"),
                operation=operation,
            ) from e

        if envelope.err != 0:
            raise ServiceError(
                self.redact(envelope.message or UNKNOWN_ERROR_MESSAGE),
                operation=operation,
                details={"err": envelope.err},
            )

        if envelope.result is None:
            raise MissingResultError("missing result", operation=operation)

        try:
            return parse(envelope.result)
        except RollbarError:
            raise
        except (ValueError, TypeError, PydanticValidationError) as e:
            raise DecodeError(
                self.redact(f"decode result: {e}"),
                operation=operation,
            ) from e

    def redact(self, value: Any) -> Any:
        """Mask this client's access token (and sensitive keys) in a string or JSON-like value."""
        return redact_value(value, self._credentials.access_token)

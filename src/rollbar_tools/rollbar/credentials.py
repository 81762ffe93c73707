"""Access token management for the Rollbar API.

Rollbar project access tokens are per project. The token is resolved in the
following order:
1. Explicit parameter passed to the client
2. Environment variable (ROLLBAR_ACCESS_TOKEN)
3. System keyring (via keyring library), keyed by project name
4. .env file in current directory or parent directories

The project name comes from the explicit parameter, the ROLLBAR_PROJECT
environment variable, or the active project stored in the keyring.

Example:
    from rollbar_tools.rollbar.credentials import get_credentials

    # Auto-discover the token for the active project
    project, token = get_credentials()

    # Or for a named project
    project, token = get_credentials(project="backend")
"""

import logging
import os
from pathlib import Path
from typing import NamedTuple

import keyring

logger = logging.getLogger(__name__)

# Default keyring service name
DEFAULT_SERVICE = "rollbar-tools"

# Environment variable names
ENV_ACCESS_TOKEN = "ROLLBAR_ACCESS_TOKEN"  # noqa: S105
ENV_PROJECT = "ROLLBAR_PROJECT"

# Keyring account holding the active project name
KEYRING_ACTIVE_PROJECT = "active_project"


class RollbarCredentials(NamedTuple):
    """Rollbar API credentials."""

    project: str | None
    access_token: str


def get_credentials(
    project: str | None = None,
    access_token: str | None = None,
    service: str = DEFAULT_SERVICE,
) -> RollbarCredentials:
    """Get the Rollbar access token from various sources.

    Args:
        project: Project name used for keyring lookup
        access_token: Explicit access token (overrides other sources)
        service: Keyring service name

    Returns:
        RollbarCredentials tuple with project and access_token

    Raises:
        ValueError: If no token can be found
    """
    resolved_project = project or os.environ.get(ENV_PROJECT)
    if not resolved_project:
        resolved_project = _get_from_keyring(service, KEYRING_ACTIVE_PROJECT)

    # 1. Explicit parameter
    resolved_token = access_token

    # 2. Environment variable
    if not resolved_token:
        resolved_token = os.environ.get(ENV_ACCESS_TOKEN)

    # 3. Keyring, per project
    if not resolved_token and resolved_project:
        resolved_token = _get_from_keyring(service, resolved_project)

    # 4. .env file
    if not resolved_token:
        resolved_token = _load_dotenv().get(ENV_ACCESS_TOKEN)

    if not resolved_token or not resolved_token.strip():
        where = f" for project '{resolved_project}'" if resolved_project else ""
        raise ValueError(
            f"Missing Rollbar access token{where}. "
            f"Set {ENV_ACCESS_TOKEN}, store it in the keyring, or provide it explicitly."
        )

    return RollbarCredentials(project=resolved_project, access_token=resolved_token.strip())


def save_credentials(
    project: str,
    access_token: str,
    service: str = DEFAULT_SERVICE,
    activate: bool = True,
) -> None:
    """Save a project's access token to the system keyring.

    Args:
        project: Project name
        access_token: Project access token
        service: Keyring service name
        activate: Also make this the active project
    """
    if not project.strip():
        raise ValueError("Project name is required")
    if not access_token.strip():
        raise ValueError("Access token is required")
    keyring.set_password(service, project.strip(), access_token.strip())
    if activate:
        set_active_project(project.strip(), service=service)
    logger.info("Access token saved to keyring (service: %s, project: %s)", service, project)


def delete_credentials(project: str, service: str = DEFAULT_SERVICE) -> None:
    """Delete a project's access token from the system keyring.

    Args:
        project: Project name
        service: Keyring service name
    """
    try:
        keyring.delete_password(service, project)
    except keyring.errors.PasswordDeleteError:
        pass  # Already deleted or doesn't exist
    if _get_from_keyring(service, KEYRING_ACTIVE_PROJECT) == project:
        try:
            keyring.delete_password(service, KEYRING_ACTIVE_PROJECT)
        except keyring.errors.PasswordDeleteError:
            pass
    logger.info("Access token deleted from keyring (service: %s, project: %s)", service, project)


def set_active_project(project: str, service: str = DEFAULT_SERVICE) -> None:
    """Record the project used when none is given explicitly."""
    keyring.set_password(service, KEYRING_ACTIVE_PROJECT, project)
    logger.debug("Active project set to %s", project)


def get_active_project(service: str = DEFAULT_SERVICE) -> str | None:
    """Return the active project from the environment or keyring."""
    return os.environ.get(ENV_PROJECT) or _get_from_keyring(service, KEYRING_ACTIVE_PROJECT)


def _get_from_keyring(service: str, account: str) -> str | None:
    """Get a value from the system keyring.

    Args:
        service: Keyring service name
        account: Account/key name

    Returns:
        Value from keyring or None if not found
    """
    try:
        return keyring.get_password(service, account)
    except keyring.errors.KeyringError as e:
        logger.debug("Keyring error for %s/%s: %s", service, account, e)
        return None


def _load_dotenv() -> dict[str, str]:
    """Load variables from the nearest .env file.

    Returns:
        Dictionary of variables from the first .env found walking up from cwd
    """
    env_vars: dict[str, str] = {}

    current = Path.cwd()
    for directory in [current, *current.parents]:
        env_file = directory / ".env"
        if env_file.exists():
            logger.debug("Loading .env from %s", env_file)
            try:
                with open(env_file, encoding="utf-8") as f:
                    for line in f:
                        line = line.strip()
                        if not line or line.startswith("#"):
                            continue
                        if "=" in line:
                            key, _, value = line.partition("=")
                            key = key.removeprefix("export ").strip()
                            value = value.strip()
                            if value and value[0] in ('"', "'") and value[-1] == value[0]:
                                value = value[1:-1]
                            env_vars[key] = value
            except OSError as e:
                logger.debug("Error reading .env file: %s", e)
            break  # Only load from first .env found

    return env_vars

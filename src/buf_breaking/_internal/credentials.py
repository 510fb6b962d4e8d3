"""Credential wiring for buf invocations.

Builds the extra environment handed to each buf subprocess. The ambient
process environment is left untouched.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

from buf_breaking.errors import ConfigurationError

logger = logging.getLogger(__name__)

RUNNER_TEMP_ENV_KEY = "RUNNER_TEMP"
NETRC_ENV_KEY = "NETRC"
HTTPS_USERNAME_ENV_KEY = "BUF_INPUT_HTTPS_USERNAME"
HTTPS_PASSWORD_ENV_KEY = "BUF_INPUT_HTTPS_PASSWORD"

# TODO: support BSR remotes other than buf.build once buf federates them.
BSR_REMOTE = "buf.build"


def write_netrc(temp_dir: Optional[str], token: str) -> Path:
    """Write a .netrc granting ``token`` access to the BSR and return its path.

    Raises:
        ConfigurationError: If the runner temp directory is unknown
    """
    if not temp_dir:
        raise ConfigurationError(f"expected {RUNNER_TEMP_ENV_KEY} to be defined")
    netrc_path = Path(temp_dir) / ".netrc"
    netrc_path.write_text(f"machine {BSR_REMOTE}\npassword {token}", encoding="utf-8")
    logger.debug("Wrote BSR credentials to %s", netrc_path)
    return netrc_path


def build_env(
    buf_token: Optional[str] = None,
    https_username: Optional[str] = None,
    https_password: Optional[str] = None,
    runner_temp: Optional[str] = None,
) -> Dict[str, str]:
    """
    Environment variables to add to every buf invocation.

    Args:
        buf_token: BSR token; written to a .netrc under ``runner_temp``
        https_username: Basic-auth user for HTTPS git inputs
        https_password: Basic-auth password for HTTPS git inputs
        runner_temp: Runner-provided temporary directory

    Returns:
        Dict of environment variables (empty when no credentials are given)

    Raises:
        ConfigurationError: If only one half of the basic-auth pair is given,
            or a token is given without a temp directory
    """
    if https_username and not https_password:
        raise ConfigurationError(
            "buf_input_https_password was not provided (required with buf_input_https_username)"
        )
    if https_password and not https_username:
        raise ConfigurationError(
            "buf_input_https_username was not provided (required with buf_input_https_password)"
        )

    env: Dict[str, str] = {}
    if buf_token:
        env[NETRC_ENV_KEY] = str(write_netrc(runner_temp, buf_token))
    if https_username and https_password:
        env[HTTPS_USERNAME_ENV_KEY] = https_username
        env[HTTPS_PASSWORD_ENV_KEY] = https_password
    return env

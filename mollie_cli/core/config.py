"""
Client configuration for the Mollie API.

Values come from explicit arguments first, then from the environment.
"""

import os
from dataclasses import dataclass

DEFAULT_BASE_URL = "https://api.mollie.com/"
DEFAULT_TIMEOUT = 60

API_TOKEN_ENV = "MOLLIE_API_TOKEN"
ORG_TOKEN_ENV = "MOLLIE_ORG_TOKEN"
BASE_URL_ENV = "MOLLIE_BASE_URL"


@dataclass(frozen=True)
class Config:
    """
    Immutable client settings.

    Attributes:
        testing: Send requests in test mode (adds testmode=true for organization tokens)
        use_org_token: Authenticate with MOLLIE_ORG_TOKEN instead of MOLLIE_API_TOKEN
        base_url: API base URL
        timeout: Request timeout in seconds

    """

    testing: bool = False
    use_org_token: bool = False
    base_url: str = DEFAULT_BASE_URL
    timeout: int = DEFAULT_TIMEOUT

    @property
    def token_env(self) -> str:
        """Name of the environment variable holding the auth token."""
        return ORG_TOKEN_ENV if self.use_org_token else API_TOKEN_ENV

    @property
    def send_testmode(self) -> bool:
        """Whether requests carry the testmode query parameter."""
        return self.testing and self.use_org_token

    @classmethod
    def from_env(
        cls,
        testing: bool = False,
        use_org_token: bool = False,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> "Config":
        """Create a config, reading the base URL from MOLLIE_BASE_URL when set."""
        return cls(
            testing=testing,
            use_org_token=use_org_token,
            base_url=os.environ.get(BASE_URL_ENV) or DEFAULT_BASE_URL,
            timeout=timeout,
        )

    def token_from_env(self) -> str | None:
        """Read the configured token from the environment."""
        return os.environ.get(self.token_env)

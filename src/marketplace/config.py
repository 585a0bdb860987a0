"""Registry configuration.

The only tunable is the identity that holds the admin role when a
registry is created. It can be supplied directly or read from the
environment (optionally via a .env file):

    MARKETPLACE_ADMIN=deployer
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


DEFAULT_ADMIN = "deployer"
ADMIN_ENV_VAR = "MARKETPLACE_ADMIN"


@dataclass(frozen=True)
class RegistryConfig:
    """Initial settings for a MarketplaceRegistry."""
    initial_admin: str = DEFAULT_ADMIN

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> RegistryConfig:
        """Build a config from environment variables.

        If env_file is given and exists, it is loaded first. Variables
        already set in the process environment take precedence.
        """
        if env_file is not None and env_file.exists():
            load_dotenv(env_file)
        admin = os.getenv(ADMIN_ENV_VAR, DEFAULT_ADMIN)
        return cls(initial_admin=admin)

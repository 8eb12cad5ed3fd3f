"""
Shared helper utilities for stack configuration.

This module provides:
- Region abbreviation mapping for resource naming
- Resource naming function (rn)
- Environment configuration utilities
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

# Region abbreviation mapping for resource naming
# Pattern: {name}-{region_abbrev}-{env} e.g. users-api-ue1-dev
REGION_ABBREVIATIONS: dict[str, str] = {
    "us-east-1": "ue1",
    "us-east-2": "ue2",
    "us-west-1": "uw1",
    "us-west-2": "uw2",
    "eu-west-1": "ew1",
    "eu-west-2": "ew2",
    "eu-west-3": "ew3",
    "eu-central-1": "ec1",
    "eu-north-1": "en1",
    "ap-northeast-1": "ane1",  # Tokyo
    "ap-northeast-2": "ane2",  # Seoul
    "ap-northeast-3": "ane3",  # Osaka
    "ap-southeast-1": "ase1",  # Singapore
    "ap-southeast-2": "ase2",  # Sydney
    "ap-south-1": "as1",  # Mumbai
    "sa-east-1": "se1",  # São Paulo
    "ca-central-1": "cc1",  # Canada
}

DEFAULT_STAGE_NAME = "dev"
DEFAULT_CONFIG_FILE = "service-proxies.json"


def get_region() -> str:
    """Get the AWS region from environment variables or default to us-east-1."""
    return os.getenv("AWS_REGION") or os.getenv("CDK_DEFAULT_REGION") or "us-east-1"


def get_region_abbrev(region: Optional[str] = None) -> str:
    """Get the region abbreviation for resource naming.

    Args:
        region: AWS region code. If None, reads from environment.

    Returns:
        Region abbreviation (e.g., 'ue1' for 'us-east-1')
    """
    if region is None:
        region = get_region()
    return REGION_ABBREVIATIONS.get(region, region[:3])


def make_resource_namer(region_abbrev: str, env_name: str):
    """Create a resource naming function.

    Args:
        region_abbrev: Region abbreviation (e.g., 'ue1')
        env_name: Environment name (e.g., 'dev', 'prod')

    Returns:
        A function that takes a base name and returns a fully qualified name
    """

    def rn(name: str, abbrev: str = region_abbrev, env: str = env_name) -> str:
        """Generate resource name with region and environment suffix."""
        return f"{name}-{abbrev}-{env}"

    return rn


def get_stage_name(env_name: str) -> str:
    """Deployment stage name; STAGE_NAME overrides the environment name."""
    return os.getenv("STAGE_NAME") or env_name or DEFAULT_STAGE_NAME


def get_config_path(context_value: Optional[str] = None) -> Path:
    """Path of the service proxy config: CDK context, then PROXY_CONFIG, then the default file."""
    return Path(context_value or os.getenv("PROXY_CONFIG") or DEFAULT_CONFIG_FILE)


def load_service_proxies(path: Path) -> List[Dict[str, Any]]:
    """Read the `apiGatewayServiceProxies` list from a JSON config file.

    Raises:
        FileNotFoundError: If the config file does not exist
        ValueError: If the file has no `apiGatewayServiceProxies` list
    """
    with open(path) as f:
        config = json.load(f)

    proxies = config.get("apiGatewayServiceProxies") if isinstance(config, dict) else None
    if not isinstance(proxies, list):
        raise ValueError(f"{path} must contain an 'apiGatewayServiceProxies' list")
    return proxies


def load_env_file(env_file: Path) -> None:
    """Load KEY=VALUE lines into the environment without overriding existing values."""
    if not env_file.exists():
        return
    with open(env_file) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                key, value = line.split("=", 1)
                # Only set if not already in environment (allow override)
                if key.strip() and not os.getenv(key.strip()):
                    os.environ[key.strip()] = value.strip()

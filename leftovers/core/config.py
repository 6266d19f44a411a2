"""YAML configuration loader with validation."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Dict, Optional, Any

import yaml

from leftovers.core.operation import DEFAULT_POLL_INTERVAL, DEFAULT_TIMEOUT

PROVIDERS = ('aws', 'gcp')


@dataclass
class AWSSettings:
    """Static AWS credentials. Empty values fall back to the environment."""
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    region: Optional[str] = None


@dataclass
class GCPSettings:
    """Service account key used for the compute API."""
    service_account_key: Optional[str] = None
    project_id: Optional[str] = None


@dataclass
class Config:
    """leftovers configuration."""
    provider: Optional[str] = None
    filter: str = ''
    resource_types: List[str] = field(default_factory=lambda: ["all"])
    no_confirm: bool = False
    dry_run: bool = False
    aws: AWSSettings = field(default_factory=AWSSettings)
    gcp: GCPSettings = field(default_factory=GCPSettings)
    operation_poll_interval: float = DEFAULT_POLL_INTERVAL
    operation_timeout: float = DEFAULT_TIMEOUT
    list_max_attempts: int = 5
    json_logs: bool = False
    verbosity: int = 0

    def should_include_resource(self, resource_type: str) -> bool:
        """Check if resource type should be processed."""
        if "all" in self.resource_types:
            return True
        return resource_type in self.resource_types

    def validate(self) -> None:
        """Raise ValueError for settings no run can work with."""
        if self.provider not in PROVIDERS:
            raise ValueError(f"Unknown provider {self.provider!r}; expected one of {', '.join(PROVIDERS)}")
        if self.operation_poll_interval <= 0:
            raise ValueError("operation_poll_interval must be positive")
        if self.operation_timeout < self.operation_poll_interval:
            raise ValueError("operation_timeout must be at least operation_poll_interval")
        if self.list_max_attempts < 1:
            raise ValueError("list_max_attempts must be at least 1")


def load_config(path: Optional[str] = None) -> Config:
    """Load config from YAML file or return defaults.

    Environment variables fill in credentials the file leaves empty.

    Args:
        path: Path to YAML config file. If None, returns default config.

    Returns:
        Config instance

    Raises:
        FileNotFoundError: If specified path doesn't exist
        yaml.YAMLError: If YAML is invalid
    """
    if path is None:
        return _apply_environment(Config())

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    return _apply_environment(_parse_config(data))


def _parse_config(data: Dict[str, Any]) -> Config:
    """Parse config dict into Config dataclass."""
    aws_data = data.get("aws", {}) or {}
    gcp_data = data.get("gcp", {}) or {}

    return Config(
        provider=data.get("provider"),
        filter=data.get("filter", "") or "",
        resource_types=data.get("resource_types", ["all"]),
        no_confirm=data.get("no_confirm", False),
        dry_run=data.get("dry_run", False),
        aws=AWSSettings(
            access_key_id=aws_data.get("access_key_id"),
            secret_access_key=aws_data.get("secret_access_key"),
            region=aws_data.get("region"),
        ),
        gcp=GCPSettings(
            service_account_key=gcp_data.get("service_account_key"),
            project_id=gcp_data.get("project_id"),
        ),
        operation_poll_interval=data.get("operation_poll_interval", DEFAULT_POLL_INTERVAL),
        operation_timeout=data.get("operation_timeout", DEFAULT_TIMEOUT),
        list_max_attempts=data.get("list_max_attempts", 5),
        json_logs=data.get("json_logs", False),
        verbosity=data.get("verbosity", 0),
    )


def _apply_environment(config: Config) -> Config:
    config.aws.access_key_id = config.aws.access_key_id or os.environ.get("AWS_ACCESS_KEY_ID")
    config.aws.secret_access_key = config.aws.secret_access_key or os.environ.get("AWS_SECRET_ACCESS_KEY")
    config.aws.region = config.aws.region or os.environ.get("AWS_REGION")
    config.gcp.service_account_key = (config.gcp.service_account_key
                                      or os.environ.get("GOOGLE_APPLICATION_CREDENTIALS"))
    return config

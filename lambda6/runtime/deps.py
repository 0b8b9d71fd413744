# =============================================================================
# Dependency Container
# =============================================================================
# Lazy-loaded AWS clients shared by all endpoints of a handler.
# Endpoints use self.deps instead of creating their own clients.
# =============================================================================

import logging
import os
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config

logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"


@dataclass
class Deps:
    """
    Dependency container for handlers.

    All AWS clients are created on first access, so a handler that never
    touches AWS never builds a client.

    Usage:
        @operation
        def archive(self, payload):
            self.deps.s3.put_object(Bucket=..., Key=..., Body=...)
    """
    region: str = field(default_factory=lambda: os.environ.get("AWS_REGION", DEFAULT_REGION))
    max_attempts: int = field(default_factory=lambda: int(os.environ.get("AWS_MAX_ATTEMPTS", "3")))
    _clients: Dict[str, Any] = field(default_factory=dict, repr=False)

    @cached_property
    def botocore_config(self) -> Config:
        """Shared botocore client configuration."""
        return Config(region_name=self.region, retries={"max_attempts": self.max_attempts})

    def client(self, service: str):
        """Get (or create) a boto3 client for `service`."""
        if service not in self._clients:
            logger.debug(f"Creating boto3 client: {service} ({self.region})")
            self._clients[service] = boto3.client(service, config=self.botocore_config)
        return self._clients[service]

    # ==========================================================================
    # AWS Clients (lazy-loaded)
    # ==========================================================================

    @cached_property
    def dynamodb(self):
        """DynamoDB resource."""
        return boto3.resource("dynamodb", config=self.botocore_config)

    @cached_property
    def s3(self):
        """S3 client."""
        return self.client("s3")

    @cached_property
    def sqs(self):
        """SQS client."""
        return self.client("sqs")

    @cached_property
    def sns(self):
        """SNS client."""
        return self.client("sns")

    @cached_property
    def lambda_client(self):
        """Lambda client (for invoking other handlers)."""
        return self.client("lambda")

    def table(self, name: Optional[str] = None):
        """DynamoDB table, named by argument or TABLE_NAME."""
        table_name = name or os.environ.get("TABLE_NAME", "")
        if not table_name:
            raise ValueError("table name is required (argument or TABLE_NAME)")
        return self.dynamodb.Table(table_name)


def create_deps(region: Optional[str] = None) -> Deps:
    """Create a new Deps instance."""
    return Deps(region=region or os.environ.get("AWS_REGION", DEFAULT_REGION))

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any, cast

import boto3
from botocore.config import Config


def create_boto3_config(
    *,
    connect_timeout: float = 5.0,
    read_timeout: float = 30.0,
    max_attempts: int = 3,
) -> Config:
    return Config(
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
        retries={"max_attempts": max_attempts, "mode": "adaptive"},
    )


def resolve_region(region: str | None = None, environ: Mapping[str, str] = os.environ) -> str | None:
    return region or environ.get("AWS_REGION") or environ.get("AWS_DEFAULT_REGION") or None


def resolve_endpoint(endpoint_url: str | None = None, environ: Mapping[str, str] = os.environ) -> str | None:
    return endpoint_url or environ.get("DYNAMODB_ENDPOINT") or None


def create_dynamodb_client(
    *,
    region: str | None = None,
    endpoint_url: str | None = None,
    config: Config | None = None,
    session: Any | None = None,
    environ: Mapping[str, str] = os.environ,
) -> Any:
    resolved_region = resolve_region(region, environ)
    sess = session or boto3.session.Session(region_name=resolved_region)

    kwargs: dict[str, Any] = {"region_name": resolved_region, "config": config or create_boto3_config()}
    resolved_endpoint = resolve_endpoint(endpoint_url, environ)
    if resolved_endpoint is not None:
        kwargs["endpoint_url"] = resolved_endpoint

    return cast(Any, sess).client("dynamodb", **kwargs)

#!/usr/bin/env python3
import os
from pathlib import Path

import aws_cdk as cdk

from dynamodb_proxy.events import load_events
from dynamodb_proxy.helpers import (
    get_config_path,
    get_region,
    get_region_abbrev,
    get_stage_name,
    load_env_file,
    load_service_proxies,
    make_resource_namer,
)
from dynamodb_proxy.logging import StructuredLogger
from dynamodb_proxy.resource_lookup import lookup_dynamodb_table, lookup_rest_api_by_name
from dynamodb_proxy.stack import ServiceProxyStack

# Load environment variables from .env file if it exists
load_env_file(Path(__file__).parent / ".env")

logger = StructuredLogger("app")

app = cdk.App()

# Get environment from context or environment variable (dev/prod)
env_name = app.node.try_get_context("environment") or os.getenv("ENVIRONMENT", "dev")

region = get_region()
region_abbrev = get_region_abbrev(region)
rn = make_resource_namer(region_abbrev, env_name)

config_path = get_config_path(app.node.try_get_context("config"))
events, errors = load_events(load_service_proxies(config_path))
for error in errors:
    logger.error(
        "Invalid service proxy entry",
        config=str(config_path),
        index=error["index"],
        errorCode=error["errorCode"],
        detail=error["message"],
    )

# Warn early about tables that do not exist yet (only plain names can be checked)
for table_name in sorted({e.table_name for e in events if isinstance(e.table_name, str)}):
    if lookup_dynamodb_table(table_name) is None:
        logger.warning("DynamoDB table not found", table_name=table_name)

# Attach to an existing REST API when one is named
existing_rest_api = None
rest_api_name = os.getenv("REST_API_NAME")
if rest_api_name:
    existing_rest_api = lookup_rest_api_by_name(rest_api_name)
    if existing_rest_api is None:
        logger.warning("REST API not found, creating a new one", rest_api_name=rest_api_name)

env = cdk.Environment(
    account=os.getenv("AWS_ACCOUNT_ID") or os.getenv("CDK_DEFAULT_ACCOUNT"),
    region=region,
)

stack = ServiceProxyStack(
    app,
    f"ServiceProxyStack-{region_abbrev}-{env_name}",
    stack_name=rn("dynamodb-proxy"),
    events=events,
    api_name=rn("dynamodb-proxy-api"),
    stage_name=get_stage_name(env_name),
    existing_rest_api=existing_rest_api,
    env=env,
    description=f"DynamoDB service proxy ({region_abbrev}-{env_name})",
)

app.synth()

"""
Resource Lookup Helper

Discovers existing AWS resources by name using boto3, so the stack can attach
methods to an existing REST API and warn about tables that do not exist yet.
"""

import functools
import os
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

# Cache boto3 clients
_clients: dict = {}


def get_client(service: str):
    """Get a cached boto3 client."""
    if service not in _clients:
        region = os.getenv("AWS_REGION") or os.getenv("CDK_DEFAULT_REGION", "us-east-1")
        _clients[service] = boto3.client(service, region_name=region)
    return _clients[service]


def _root_resource_id(client, rest_api_id: str) -> Optional[str]:
    paginator = client.get_paginator("get_resources")
    for page in paginator.paginate(restApiId=rest_api_id):
        for resource in page.get("items", []):
            if resource.get("path") == "/":
                return resource["id"]
    return None


@functools.lru_cache(maxsize=128)
def lookup_rest_api_by_name(api_name: str) -> Optional[dict]:
    """Find a REST API by exact name, with its root resource ID."""
    client = get_client("apigateway")
    try:
        paginator = client.get_paginator("get_rest_apis")
        for page in paginator.paginate():
            for api in page.get("items", []):
                if api["name"] == api_name:
                    return {
                        "rest_api_id": api["id"],
                        "root_resource_id": api.get("rootResourceId") or _root_resource_id(client, api["id"]),
                    }
    except (BotoCoreError, ClientError):
        return None
    return None


@functools.lru_cache(maxsize=128)
def lookup_dynamodb_table(table_name: str) -> Optional[dict]:
    """Check if a DynamoDB table exists and get its ARN."""
    client = get_client("dynamodb")
    try:
        response = client.describe_table(TableName=table_name)
        return {
            "table_name": response["Table"]["TableName"],
            "table_arn": response["Table"]["TableArn"],
        }
    except client.exceptions.ResourceNotFoundException:
        return None
    except (BotoCoreError, ClientError):
        return None

"""
Test fixtures for the proxy compiler tests.

Provides event factories and a quiet logger.
"""

from typing import Any, Callable, Dict

import pytest

from dynamodb_proxy.events import Action, EventSpec, KeySpec
from dynamodb_proxy.logging import StructuredLogger


@pytest.fixture
def hash_key() -> KeySpec:
    """Hash key taken from the {id} path segment."""
    return KeySpec(attribute_type="S", path_param="id")


@pytest.fixture
def range_key() -> KeySpec:
    """Range key taken from the `sort` query string parameter."""
    return KeySpec(attribute_type="N", query_string_param="sort")


@pytest.fixture
def make_event(hash_key: KeySpec) -> Callable[..., EventSpec]:
    """Factory for events; defaults to GET /users/{id} -> GetItem on Users."""

    def _make_event(**overrides: Any) -> EventSpec:
        fields: Dict[str, Any] = {
            "method": "get",
            "path": "users/{id}",
            "action": Action.GET_ITEM,
            "table_name": "Users",
            "hash_key": hash_key,
        }
        fields.update(overrides)
        return EventSpec(**fields)

    return _make_event


@pytest.fixture
def proxy_config() -> Dict[str, Any]:
    """Raw `dynamodb` config entry as written by users."""
    return {
        "path": "/users/{id}",
        "method": "GET",
        "action": "GetItem",
        "tableName": "Users",
        "hashKey": {"pathParam": "id", "attributeType": "S"},
    }


@pytest.fixture
def logger() -> StructuredLogger:
    """Logger with a fixed correlation ID."""
    return StructuredLogger("tests", "test-correlation-id")

"""
Event definitions for DynamoDB service proxies.

An event is one HTTP binding (method + path) to a DynamoDB action. Events are
parsed from the service proxy config:

    {
        "apiGatewayServiceProxies": [
            {
                "dynamodb": {
                    "path": "/users/{id}",
                    "method": "get",
                    "action": "GetItem",
                    "tableName": "Users",
                    "hashKey": {"pathParam": "id", "attributeType": "S"},
                    "cors": true
                }
            }
        ]
    }
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .errors import ErrorCode, ProxyError

SERVICE_NAME = "dynamodb"

HTTP_METHODS = ("get", "post", "put", "patch", "delete", "head", "options", "any")

# Table names may be plain strings or CloudFormation intrinsics ({"Ref": ...})
TableName = Union[str, Dict[str, Any]]


def _object(value: Any, field_name: str) -> Mapping[str, Any]:
    """Return a config block that must be an object; missing blocks are empty."""
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ProxyError(
            ErrorCode.INVALID_EVENT,
            f"{field_name} must be an object",
            {"field": field_name, "type": type(value).__name__},
        )
    return value


def _response_template_overrides(value: Any) -> Optional[Dict[str, Any]]:
    """Validate `response.template`: each outcome is a JSON template string or a content-type map."""
    overrides = _object(value, "response.template")
    for outcome, template in overrides.items():
        if template and not isinstance(template, (str, Mapping)):
            raise ProxyError(
                ErrorCode.INVALID_EVENT,
                f"response.template.{outcome} must be a string or an object",
                {"field": f"response.template.{outcome}", "type": type(template).__name__},
            )
    return dict(overrides) if overrides else None


class Action(str, Enum):
    """DynamoDB actions an event can proxy to."""

    PUT_ITEM = "PutItem"
    GET_ITEM = "GetItem"
    DELETE_ITEM = "DeleteItem"

    @classmethod
    def parse(cls, value: Any) -> "Action":
        """Parse an action name, rejecting anything outside the enumeration."""
        if isinstance(value, cls):
            return value
        for action in cls:
            if action.value == value:
                return action
        raise ProxyError(
            ErrorCode.UNSUPPORTED_ACTION,
            f"Unsupported DynamoDB action: {value!r}",
            {"action": value, "supportedActions": [a.value for a in cls]},
        )


@dataclass(frozen=True)
class KeySpec:
    """Source of one key attribute: a path segment, a query parameter, or a literal."""

    attribute_type: str
    path_param: Optional[str] = None
    query_string_param: Optional[str] = None
    name: Optional[str] = None
    value: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "KeySpec":
        if not isinstance(data, Mapping):
            raise ProxyError(ErrorCode.INVALID_EVENT, "Key definition must be an object", {"key": data})
        if not data.get("attributeType"):
            raise ProxyError(ErrorCode.INVALID_EVENT, "Key definition requires attributeType", {"key": dict(data)})
        return cls(
            attribute_type=data["attributeType"],
            path_param=data.get("pathParam"),
            query_string_param=data.get("queryStringParam"),
            name=data.get("name"),
            value=data.get("value"),
        )


@dataclass(frozen=True)
class AuthSpec:
    """Method authorization settings."""

    authorization_type: str = "NONE"
    authorizer_id: Optional[Any] = None
    authorization_scopes: Optional[Tuple[str, ...]] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "AuthSpec":
        data = _object(data, "auth")
        if not data:
            return cls()
        authorizer_id = data.get("authorizerId")
        authorization_type = data.get("authorizationType") or ("CUSTOM" if authorizer_id else "NONE")
        scopes = data.get("authorizationScopes")
        if scopes and not isinstance(scopes, (list, tuple)):
            raise ProxyError(ErrorCode.INVALID_EVENT, "auth.authorizationScopes must be a list", {"field": "auth"})
        return cls(
            authorization_type=authorization_type,
            authorizer_id=authorizer_id,
            authorization_scopes=tuple(scopes) if scopes else None,
        )


@dataclass(frozen=True)
class CorsSpec:
    """CORS settings; `cors: true` in config means any origin."""

    origin: str = "*"
    origins: Tuple[str, ...] = ()
    allow_credentials: bool = False

    @classmethod
    def from_value(cls, value: Any) -> Optional["CorsSpec"]:
        if not value:
            return None
        if value is True:
            return cls()
        if not isinstance(value, Mapping):
            raise ProxyError(ErrorCode.INVALID_EVENT, "cors must be true or an object", {"cors": value})
        return cls(
            origin=value.get("origin", "*"),
            origins=tuple(value.get("origins") or ()),
            allow_credentials=bool(value.get("allowCredentials", False)),
        )


@dataclass(frozen=True)
class EventSpec:
    """One HTTP binding to a DynamoDB table."""

    method: str
    path: str
    action: Action
    table_name: TableName
    hash_key: Optional[KeySpec] = None
    range_key: Optional[KeySpec] = None
    condition: Optional[str] = None
    auth: AuthSpec = field(default_factory=AuthSpec)
    private: bool = False
    request_templates: Optional[Dict[str, Any]] = None
    response_templates: Optional[Dict[str, Any]] = None
    cors: Optional[CorsSpec] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EventSpec":
        """
        Build an event from one `dynamodb` config entry.

        Raises:
            ProxyError: If required fields are missing, a block has the wrong shape
                or the action is unsupported
        """
        data = _object(data, "dynamodb")
        missing = [name for name in ("path", "method", "action", "tableName") if not data.get(name)]
        if missing:
            raise ProxyError(
                ErrorCode.INVALID_EVENT,
                "Event is missing required fields",
                {"missingFields": missing},
            )

        method = str(data["method"]).lower()
        if method not in HTTP_METHODS:
            raise ProxyError(ErrorCode.INVALID_EVENT, f"Unsupported HTTP method: {data['method']}", {"method": method})
        if not isinstance(data["path"], str):
            raise ProxyError(ErrorCode.INVALID_EVENT, "path must be a string", {"field": "path"})

        request = _object(data.get("request"), "request")
        response = _object(data.get("response"), "response")
        request_templates = _object(request.get("template"), "request.template")

        return cls(
            method=method,
            path=normalize_event_path(data["path"]),
            action=Action.parse(data["action"]),
            table_name=data["tableName"],
            hash_key=KeySpec.from_dict(data["hashKey"]) if data.get("hashKey") else None,
            range_key=KeySpec.from_dict(data["rangeKey"]) if data.get("rangeKey") else None,
            condition=data.get("condition"),
            auth=AuthSpec.from_dict(data.get("auth")),
            private=bool(data.get("private", False)),
            request_templates=dict(request_templates) if request_templates else None,
            response_templates=_response_template_overrides(response.get("template")),
            cors=CorsSpec.from_value(data.get("cors")),
        )


def normalize_event_path(path: str) -> str:
    """Strip surrounding slashes; the root path becomes an empty string."""
    return path.strip().strip("/")


def load_events(
    service_proxies: List[Mapping[str, Any]],
) -> Tuple[List[EventSpec], List[Dict[str, Any]]]:
    """
    Parse service proxy config entries into events.

    Entries for other services are ignored. Invalid entries are skipped and
    reported so one bad entry does not block the rest.

    Args:
        service_proxies: The `apiGatewayServiceProxies` list

    Returns:
        Tuple of (parsed events, error report entries)
    """
    events: List[EventSpec] = []
    errors: List[Dict[str, Any]] = []

    for index, entry in enumerate(service_proxies):
        if not isinstance(entry, Mapping) or SERVICE_NAME not in entry:
            continue
        try:
            events.append(EventSpec.from_dict(entry[SERVICE_NAME]))
        except ProxyError as e:
            errors.append({"index": index, **e.to_dict()})

    return events, errors

"""
Logical IDs and resource references for the REST API.

Path parts are normalized the same way for resource and method IDs:
`/users/{id}` becomes `UsersIdVar`, `/user-lists` becomes `UserDashlists`.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List

REST_API_LOGICAL_ID = "ApiGatewayRestApi"

_VARIABLE_PART = re.compile(r"\{(.*)\}")
_NON_ALPHANUMERIC = re.compile(r"[^0-9A-Za-z]")


@dataclass(frozen=True)
class ApiContext:
    """The REST API the methods attach to: created in the stack or imported by ID."""

    rest_api_id: Any = None
    root_resource_id: Any = None

    def __post_init__(self) -> None:
        if self.rest_api_id is None:
            object.__setattr__(self, "rest_api_id", {"Ref": REST_API_LOGICAL_ID})
        if self.root_resource_id is None:
            object.__setattr__(self, "root_resource_id", {"Fn::GetAtt": [REST_API_LOGICAL_ID, "RootResourceId"]})

    @classmethod
    def imported(cls, rest_api_id: str, root_resource_id: str) -> "ApiContext":
        return cls(rest_api_id=rest_api_id, root_resource_id=root_resource_id)

    @property
    def is_imported(self) -> bool:
        return isinstance(self.rest_api_id, str)


def _upper_first(value: str) -> str:
    return value[:1].upper() + value[1:]


def normalize_path_part(part: str) -> str:
    part = part.replace("-", "Dash")
    part = _VARIABLE_PART.sub(r"\1Var", part)
    return _upper_first(_NON_ALPHANUMERIC.sub("", part))


def normalize_path(path: str) -> str:
    return "".join(normalize_path_part(part) for part in path.split("/") if part)


def normalize_method_name(method: str) -> str:
    return _upper_first(method.lower())


def get_resource_name(path: str) -> str:
    """Normalized resource name; empty for the root path."""
    return normalize_path(path)


def get_resource_logical_id(path: str) -> str:
    return f"ApiGatewayResource{normalize_path(path)}"


def get_method_logical_id(resource_name: str, method: str) -> str:
    return f"ApiGatewayMethod{resource_name}{normalize_method_name(method)}"


def get_resource_id(path: str, api: ApiContext) -> Any:
    """Reference to the API resource for a path; the root maps to the API's root resource."""
    if not path.strip("/"):
        return api.root_resource_id
    return {"Ref": get_resource_logical_id(path)}


def compile_path_resources(path: str, api: ApiContext) -> Dict[str, Dict[str, Any]]:
    """
    `AWS::ApiGateway::Resource` entries for every prefix of one path, parents first.

    The root path has no resource of its own.
    """
    resources: Dict[str, Dict[str, Any]] = {}

    parts: List[str] = [part for part in path.split("/") if part]
    for depth in range(1, len(parts) + 1):
        resources[get_resource_logical_id("/".join(parts[:depth]))] = {
            "Type": "AWS::ApiGateway::Resource",
            "Properties": {
                "ParentId": get_resource_id("/".join(parts[: depth - 1]), api),
                "PathPart": parts[depth - 1],
                "RestApiId": api.rest_api_id,
            },
        }

    return resources

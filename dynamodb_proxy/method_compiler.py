"""
Method compiler for DynamoDB service proxies.

Folds an ordered list of events into a CloudFormation resource map: one
`AWS::ApiGateway::Method` per event plus the `AWS::ApiGateway::Resource` entries
its path needs. A failing event is skipped and reported; entries already
compiled for other events are left as they are.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .errors import ErrorCode, ProxyError, handle_error
from .events import EventSpec
from .integration import build_integration
from .keys import make_key_definition
from .logging import StructuredLogger
from .naming import ApiContext, compile_path_resources, get_method_logical_id, get_resource_id, get_resource_name
from .responses import get_method_responses

METHOD_RESOURCE_TYPE = "AWS::ApiGateway::Method"


@dataclass(frozen=True)
class CompileResult:
    """Accumulator threaded through the compilation pass."""

    resources: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    method_logical_ids: Tuple[str, ...] = ()
    compiled_events: Tuple[EventSpec, ...] = ()
    errors: Tuple[Dict[str, Any], ...] = ()
    warnings: Tuple[Dict[str, Any], ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


def build_method_properties(event: EventSpec, api: ApiContext) -> Dict[str, Any]:
    """Properties of the method resource, integration and method responses included."""
    properties: Dict[str, Any] = {
        "HttpMethod": event.method.upper(),
        "RequestParameters": {},
        "AuthorizationType": event.auth.authorization_type,
    }
    if event.auth.authorization_scopes:
        properties["AuthorizationScopes"] = list(event.auth.authorization_scopes)
    if event.auth.authorizer_id:
        properties["AuthorizerId"] = event.auth.authorizer_id

    properties.update(
        {
            "ApiKeyRequired": bool(event.private),
            "ResourceId": get_resource_id(event.path, api),
            "RestApiId": api.rest_api_id,
            "Integration": build_integration(event),
            "MethodResponses": get_method_responses(event),
        }
    )
    return properties


def unresolved_keys(event: EventSpec) -> List[str]:
    """Names of key specs that were given but have no populated source."""
    unresolved = []
    for name, key_spec in (("hashKey", event.hash_key), ("rangeKey", event.range_key)):
        if key_spec is not None and make_key_definition(key_spec) is None:
            unresolved.append(name)
    return unresolved


class MethodCompiler:
    """
    Compiles DynamoDB proxy events into API Gateway method resources.

    Example:
        compiler = MethodCompiler()
        result = compiler.compile(events)
        template["Resources"].update(result.resources)
    """

    def __init__(
        self,
        api: Optional[ApiContext] = None,
        fail_fast: bool = False,
        logger: Optional[StructuredLogger] = None,
    ) -> None:
        """
        Initialize the compiler.

        Args:
            api: REST API the methods attach to (defaults to the stack's own API)
            fail_fast: Raise the first event error instead of skipping the event
            logger: Logger for compile reports
        """
        self.api = api or ApiContext()
        self.fail_fast = fail_fast
        self.logger = logger or StructuredLogger(__name__)

    def compile_method(self, event: EventSpec) -> Tuple[str, Dict[str, Any]]:
        """
        Compile one event into its logical ID and method resource.

        Raises:
            ProxyError: If the event's action has no templates or its overrides are malformed
        """
        resource_name = get_resource_name(event.path)
        logical_id = get_method_logical_id(resource_name, event.method)
        resource = {
            "Type": METHOD_RESOURCE_TYPE,
            "Properties": build_method_properties(event, self.api),
        }
        return logical_id, resource

    def path_resources(self, result: CompileResult, event: EventSpec) -> Dict[str, Dict[str, Any]]:
        """
        API resources the event's path still needs.

        Raises:
            ProxyError: LOGICAL_ID_COLLISION when a resource ID is already held by another path
        """
        needed: Dict[str, Dict[str, Any]] = {}
        for logical_id, resource in compile_path_resources(event.path, self.api).items():
            existing = result.resources.get(logical_id)
            if existing is None:
                needed[logical_id] = resource
            elif existing != resource:
                raise ProxyError(
                    ErrorCode.LOGICAL_ID_COLLISION,
                    f"Logical ID {logical_id} is already defined for another path",
                    {"logicalId": logical_id, "path": event.path, "method": event.method},
                )
        return needed

    def add_event(self, result: CompileResult, index: int, event: EventSpec) -> CompileResult:
        """Fold one event into the accumulator, returning the new accumulator."""
        warnings = list(result.warnings)
        for key_name in unresolved_keys(event):
            warning = {
                "index": index,
                "errorCode": ErrorCode.UNRESOLVED_KEY_SPEC,
                "message": f"{key_name} has no pathParam, queryStringParam or name/value; key omitted",
                "key": key_name,
            }
            self.logger.warning(warning["message"], index=index, path=event.path, method=event.method)
            warnings.append(warning)

        try:
            logical_id, resource = self.compile_method(event)
            if logical_id in result.resources:
                raise ProxyError(
                    ErrorCode.LOGICAL_ID_COLLISION,
                    f"Logical ID {logical_id} is already defined",
                    {"logicalId": logical_id, "path": event.path, "method": event.method},
                )
            path_resources = self.path_resources(result, event)
        except Exception as e:
            if self.fail_fast:
                raise
            report = handle_error(e)
            self.logger.error(
                f"Skipping DynamoDB proxy event: {report['message']}", index=index, errorCode=report["errorCode"]
            )
            return replace(result, errors=result.errors + ({"index": index, **report},), warnings=tuple(warnings))

        self.logger.debug("Compiled DynamoDB proxy method", logicalId=logical_id, index=index)
        return replace(
            result,
            resources={**result.resources, **path_resources, logical_id: resource},
            method_logical_ids=result.method_logical_ids + (logical_id,),
            compiled_events=result.compiled_events + (event,),
            warnings=tuple(warnings),
        )

    def compile(
        self,
        events: Iterable[EventSpec],
        resources: Optional[Dict[str, Dict[str, Any]]] = None,
    ) -> CompileResult:
        """
        Compile every event in order.

        Args:
            events: Events to compile
            resources: Existing resource map to add to (not modified)

        Returns:
            The compile result; `resources` holds the existing entries plus the new methods
        """
        result = CompileResult(resources=dict(resources or {}))
        for index, event in enumerate(events):
            result = self.add_event(result, index, event)

        self.logger.info(
            "Compiled DynamoDB proxy methods",
            methods=len(result.method_logical_ids),
            errors=len(result.errors),
            warnings=len(result.warnings),
        )
        return result

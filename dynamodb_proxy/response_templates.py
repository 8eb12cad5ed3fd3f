"""
Response mapping templates for DynamoDB actions.

Only GetItem has a default: it flattens the typed attribute map in `Item`
(`{"name": {"S": "x"}}`) into plain JSON (`{"name":"x"}`).
"""

from typing import Any, Dict, Mapping

from .errors import ErrorCode, ProxyError
from .events import Action, EventSpec
from .request_templates import CONTENT_TYPES, JSON_CONTENT_TYPE

# escapeJavaScript also escapes single quotes, which are legal inside a JSON string,
# so the second step turns \' back into '
GET_ITEM_RESPONSE_TEMPLATE = (
    "#set($item = $input.path('$.Item')){"
    "#foreach($key in $item.keySet())"
    "#set ($value = $item.get($key))"
    "#foreach( $type in $value.keySet())"
    '"$key":"$util.escapeJavaScript($value.get($type)).replaceAll("\\\\\'","\'")"'
    "#if($foreach.hasNext()),#end"
    "#end"
    "#if($foreach.hasNext()),#end"
    "#end}"
)

# Keys of the `response.template` override block
SUCCESS = "success"
CLIENT_ERROR = "clientError"
SERVER_ERROR = "serverError"


def get_default_response_templates(event: EventSpec) -> Dict[str, str]:
    """Default success templates; empty for every action but GetItem."""
    if event.action is Action.GET_ITEM:
        return {content_type: GET_ITEM_RESPONSE_TEMPLATE for content_type in CONTENT_TYPES}
    return {}


def _override(outcome: str, value: Any) -> Dict[str, Any]:
    # A bare string override applies to JSON responses
    if isinstance(value, str):
        return {JSON_CONTENT_TYPE: value}
    if isinstance(value, Mapping):
        return dict(value)
    raise ProxyError(
        ErrorCode.INVALID_EVENT,
        f"Response template override for {outcome} must be a string or a content-type map",
        {"field": f"response.template.{outcome}", "type": type(value).__name__},
    )


def get_response_templates(event: EventSpec) -> Dict[str, Dict[str, Any]]:
    """
    Response templates per outcome (success, clientError, serverError).

    Overrides from the event replace the defaults for that outcome.

    Raises:
        ProxyError: INVALID_EVENT when an override is neither a string nor a map
    """
    overrides = event.response_templates or {}
    if not isinstance(overrides, Mapping):
        raise ProxyError(
            ErrorCode.INVALID_EVENT,
            "Response template overrides must map outcomes to templates",
            {"field": "response.template", "type": type(overrides).__name__},
        )

    templates: Dict[str, Dict[str, Any]] = {
        SUCCESS: get_default_response_templates(event),
        CLIENT_ERROR: {},
        SERVER_ERROR: {},
    }
    for outcome, value in overrides.items():
        if outcome in templates and value:
            templates[outcome] = _override(outcome, value)
    return templates

"""
Request mapping templates for DynamoDB actions.

Each template is emitted as `{"Fn::Sub": [template, values]}` so table names,
key names and conditions are substituted by CloudFormation at deploy time while
VTL references (`$input`, `$util`, ...) pass through to API Gateway untouched.
"""

from typing import Any, Dict, List, Mapping, Tuple

from .errors import ErrorCode, ProxyError
from .events import Action, EventSpec
from .keys import make_key_definition

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
CONTENT_TYPES = (JSON_CONTENT_TYPE, FORM_CONTENT_TYPE)

HASH_KEY_CLAUSE = '"${HashKey}": {"${HashAttributeType}": "${HashAttributeValue}"}'
RANGE_KEY_CLAUSE = '"${RangeKey}": {"${RangeAttributeType}": "${RangeAttributeValue}"}'
CONDITION_CLAUSE = ',"ConditionExpression": "${ConditionExpression}"'

# Copies every attribute of the request body with the type tag the caller sent, then closes "Item"
PUT_ITEM_BODY_LOOP = """
      #set ($body = $util.parseJson($input.body))
      #foreach( $key in $body.keySet())
        #set ($item = $body.get($key))
        #foreach( $type in $item.keySet())
          "$key":{"$type" : "$item.get($type)"}
        #if($foreach.hasNext()),#end
        #end
      #if($foreach.hasNext()),#end
      #end
    }
    """


def _key_clauses(event: EventSpec) -> Tuple[List[str], Dict[str, str]]:
    """Key clauses for the keys that resolved, with their substitution values."""
    clauses: List[str] = []
    values: Dict[str, str] = {}

    hash_key = make_key_definition(event.hash_key)
    if hash_key is not None:
        clauses.append(HASH_KEY_CLAUSE)
        values.update(hash_key.to_sub_values("Hash"))

    range_key = make_key_definition(event.range_key)
    if range_key is not None:
        clauses.append(RANGE_KEY_CLAUSE)
        values.update(range_key.to_sub_values("Range"))

    return clauses, values


def _condition_clause(event: EventSpec, values: Dict[str, Any]) -> str:
    if event.condition is None:
        return ""
    values["ConditionExpression"] = event.condition
    return CONDITION_CLAUSE


def build_delete_item_request_template(event: EventSpec) -> Dict[str, Any]:
    values: Dict[str, Any] = {"TableName": event.table_name}
    clauses, key_values = _key_clauses(event)
    values.update(key_values)

    template = '{"TableName": "${TableName}","Key":{' + ",".join(clauses) + "}"
    template += _condition_clause(event, values)
    template += "}"
    return {"Fn::Sub": [template, values]}


def build_get_item_request_template(event: EventSpec) -> Dict[str, Any]:
    values: Dict[str, Any] = {"TableName": event.table_name}
    clauses, key_values = _key_clauses(event)
    values.update(key_values)

    template = '{"TableName": "${TableName}","Key":{' + ",".join(clauses) + "}}"
    return {"Fn::Sub": [template, values]}


def build_put_item_request_template(event: EventSpec) -> Dict[str, Any]:
    values: Dict[str, Any] = {"TableName": event.table_name}
    clauses, key_values = _key_clauses(event)
    values.update(key_values)

    # Key attributes always precede the body attributes, so each gets a trailing comma
    template = '{"TableName": "${TableName}","Item": {' + "".join(clause + "," for clause in clauses)
    template += PUT_ITEM_BODY_LOOP
    template += _condition_clause(event, values)
    template += "}"
    return {"Fn::Sub": [template, values]}


def build_request_template(event: EventSpec) -> Dict[str, Any]:
    """
    Build the default request template for the event's action.

    Raises:
        ProxyError: UNSUPPORTED_ACTION for anything but PutItem, GetItem, DeleteItem
    """
    action = event.action
    if action is Action.PUT_ITEM:
        return build_put_item_request_template(event)
    elif action is Action.GET_ITEM:
        return build_get_item_request_template(event)
    elif action is Action.DELETE_ITEM:
        return build_delete_item_request_template(event)
    else:
        raise ProxyError(
            ErrorCode.UNSUPPORTED_ACTION,
            f"No request template for DynamoDB action: {action!r}",
            {"action": getattr(action, "value", action)},
        )


def get_request_templates(event: EventSpec) -> Dict[str, Any]:
    """
    Default templates for every content type, with the event's overrides applied.

    Raises:
        ProxyError: UNSUPPORTED_ACTION for an action without templates, INVALID_EVENT
            when the overrides are not a content-type map
    """
    overrides = event.request_templates or {}
    if not isinstance(overrides, Mapping):
        raise ProxyError(
            ErrorCode.INVALID_EVENT,
            "Request template overrides must map content types to templates",
            {"field": "request.template", "type": type(overrides).__name__},
        )

    templates: Dict[str, Any] = {content_type: build_request_template(event) for content_type in CONTENT_TYPES}
    templates.update(overrides)
    return templates

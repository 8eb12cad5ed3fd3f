"""
Integration descriptor for DynamoDB proxy methods.

API Gateway calls DynamoDB through its AWS service integration, which is
always a POST to the action endpoint regardless of the public HTTP method.
"""

from typing import Any, Dict, List

from .events import EventSpec
from .request_templates import get_request_templates
from .response_templates import CLIENT_ERROR, SERVER_ERROR, SUCCESS, get_response_templates
from .responses import add_cors

ROLE_LOGICAL_ID = "ApigatewayToDynamodbRole"

ACTION_URI = "arn:${AWS::Partition}:apigateway:${AWS::Region}:dynamodb:action/${action}"


def build_integration_responses(event: EventSpec) -> List[Dict[str, Any]]:
    """Status-code selection rules: 2xx, 4xx and 5xx."""
    response_templates = get_response_templates(event)
    return [
        {
            "StatusCode": 200,
            "SelectionPattern": r"2\d{2}",
            "ResponseParameters": {},
            "ResponseTemplates": response_templates[SUCCESS],
        },
        {
            "StatusCode": 400,
            "SelectionPattern": r"4\d{2}",
            "ResponseParameters": {},
            "ResponseTemplates": response_templates[CLIENT_ERROR],
        },
        {
            "StatusCode": 500,
            "SelectionPattern": r"5\d{2}",
            "ResponseParameters": {},
            "ResponseTemplates": response_templates[SERVER_ERROR],
        },
    ]


def build_integration(event: EventSpec) -> Dict[str, Any]:
    """
    Build the `Integration` property of the method resource.

    Raises:
        ProxyError: UNSUPPORTED_ACTION when no request template exists for the action
    """
    request_templates = get_request_templates(event)
    return {
        "IntegrationHttpMethod": "POST",
        "Type": "AWS",
        "Credentials": {"Fn::GetAtt": [ROLE_LOGICAL_ID, "Arn"]},
        "Uri": {"Fn::Sub": [ACTION_URI, {"action": event.action.value}]},
        "PassthroughBehavior": "NEVER",
        "RequestTemplates": request_templates,
        "IntegrationResponses": add_cors(event, build_integration_responses(event)),
    }

"""
Method responses and CORS headers.

CORS adds the Access-Control-Allow-Origin header, and Access-Control-Allow-Credentials
when credentials are allowed; the preflight OPTIONS method is outside this package.
"""

from typing import Any, Dict, List

from .events import CorsSpec, EventSpec

ALLOW_ORIGIN_HEADER = "method.response.header.Access-Control-Allow-Origin"
ALLOW_CREDENTIALS_HEADER = "method.response.header.Access-Control-Allow-Credentials"

STATUS_CODES = (200, 400, 500)


def cors_origin(cors: CorsSpec) -> str:
    """Origin header value; a non-empty `origins` list wins over `origin`."""
    if cors.origins:
        return ",".join(cors.origins)
    return cors.origin


def cors_headers(cors: CorsSpec) -> Dict[str, str]:
    """Header mappings for integration responses; values are quoted static strings."""
    headers = {ALLOW_ORIGIN_HEADER: f"'{cors_origin(cors)}'"}
    if cors.allow_credentials:
        headers[ALLOW_CREDENTIALS_HEADER] = "'true'"
    return headers


def add_cors(event: EventSpec, integration_responses: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Return copies of the integration responses with the CORS headers mapped in.

    Responses are returned unchanged when the event has no CORS config.
    """
    if event.cors is None:
        return integration_responses

    headers = cors_headers(event.cors)
    return [
        {
            **response,
            "ResponseParameters": {**response.get("ResponseParameters", {}), **headers},
        }
        for response in integration_responses
    ]


def get_method_responses(event: EventSpec) -> List[Dict[str, Any]]:
    """Method responses for 200/400/500, declaring the CORS headers when enabled."""
    response_parameters: Dict[str, Any] = {}
    if event.cors is not None:
        response_parameters = {header: True for header in cors_headers(event.cors)}

    return [
        {
            "ResponseParameters": dict(response_parameters),
            "ResponseModels": {},
            "StatusCode": status_code,
        }
        for status_code in STATUS_CODES
    ]

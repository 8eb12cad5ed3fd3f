"""
API Gateway to DynamoDB service proxy compiler.

Turns declarative HTTP bindings into CloudFormation method resources with
VTL mapping templates that speak the DynamoDB wire protocol.
"""

from .errors import ErrorCode, ProxyError
from .events import Action, AuthSpec, CorsSpec, EventSpec, KeySpec, load_events
from .method_compiler import CompileResult, MethodCompiler

__all__ = [
    "Action",
    "AuthSpec",
    "CompileResult",
    "CorsSpec",
    "ErrorCode",
    "EventSpec",
    "KeySpec",
    "MethodCompiler",
    "ProxyError",
    "load_events",
]

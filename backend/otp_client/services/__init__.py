# Services package

from .auth import (
    AuthClient,
    AuthClientError,
    EndpointError,
    MalformedResponseError,
    TransportError,
)
from .endpoints import EndpointResolver, build_headers, build_http_client
from .events import EventHook, EventRecorder, log_event
from .flow import FlowStage, LoginFlow

__all__ = [
    "AuthClient",
    "AuthClientError",
    "EndpointError",
    "EndpointResolver",
    "EventHook",
    "EventRecorder",
    "FlowStage",
    "LoginFlow",
    "MalformedResponseError",
    "TransportError",
    "build_headers",
    "build_http_client",
    "log_event",
]

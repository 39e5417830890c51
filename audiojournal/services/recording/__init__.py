"""
Recording module - Permission providers and the recording session controller.
"""

from .authorization import BaseAuthorizer, DeviceAuthorizer, StaticAuthorizer, create_authorizer
from .controller import RecordingSessionController

__all__ = [
    "BaseAuthorizer",
    "DeviceAuthorizer",
    "RecordingSessionController",
    "StaticAuthorizer",
    "create_authorizer",
]

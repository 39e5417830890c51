"""
Microphone permission providers.

Desktop and server hosts have no permission prompt comparable to a phone's,
so ``DeviceAuthorizer`` derives the status from whether PortAudio exposes a
usable input device. ``StaticAuthorizer`` answers with a fixed status and
is used for headless deployments and tests.
"""

import asyncio
import logging
from abc import ABC, abstractmethod

from audiojournal.core.models import AuthorizationStatus

logger = logging.getLogger(__name__)


class BaseAuthorizer(ABC):
    """Interface that every permission provider must implement."""

    @abstractmethod
    async def request_authorization(self) -> AuthorizationStatus:
        """Ask the host for microphone + speech-recognition permission.

        May take arbitrarily long to resolve; callers must not assume a
        timely answer.

        Returns:
            The status reported by the host.
        """


class StaticAuthorizer(BaseAuthorizer):
    """Always reports the status it was constructed with."""

    def __init__(self, status: AuthorizationStatus = AuthorizationStatus.authorized) -> None:
        self.status = status

    async def request_authorization(self) -> AuthorizationStatus:
        return self.status


class DeviceAuthorizer(BaseAuthorizer):
    """Grants access when an input device is available.

    - ``authorized``: a device with input channels was found
    - ``restricted``: the audio host works but offers no input device
    - ``denied``: the audio host itself cannot be queried
    """

    def __init__(self, device: int | str | None = None) -> None:
        self._device = device

    def _query_devices(self) -> AuthorizationStatus:
        try:
            import sounddevice as sd
        except OSError:
            logger.warning("PortAudio library is not available", exc_info=True)
            return AuthorizationStatus.denied

        try:
            info = sd.query_devices(self._device, "input")
        except ValueError:
            # No default input device / device has no input channels
            return AuthorizationStatus.restricted
        except sd.PortAudioError:
            logger.warning("Audio host refused the device query", exc_info=True)
            return AuthorizationStatus.denied

        if not info or info.get("max_input_channels", 0) < 1:
            return AuthorizationStatus.restricted
        logger.info("Microphone available: %s", info.get("name", "unknown"))
        return AuthorizationStatus.authorized

    async def request_authorization(self) -> AuthorizationStatus:
        return await asyncio.to_thread(self._query_devices)


def create_authorizer(mode: str, **kwargs) -> BaseAuthorizer:
    """
    Factory function to create a permission provider.

    Args:
        mode: "device", "granted" or "denied"
        **kwargs: Provider-specific configuration

    Returns:
        BaseAuthorizer implementation instance

    Raises:
        ValueError: If mode is unknown
    """
    if mode == "device":
        device = kwargs.get("device")
        if isinstance(device, str) and device.isdigit():
            device = int(device)
        return DeviceAuthorizer(device=device)
    elif mode == "granted":
        return StaticAuthorizer(AuthorizationStatus.authorized)
    elif mode == "denied":
        return StaticAuthorizer(AuthorizationStatus.denied)
    else:
        raise ValueError(f"Unknown authorization mode: {mode}")

"""Tests for the microphone permission providers."""

import sys
from unittest.mock import MagicMock, patch

import pytest

from audiojournal.core.models import AuthorizationStatus
from audiojournal.services.recording import (
    DeviceAuthorizer,
    StaticAuthorizer,
    create_authorizer,
)


class FakePortAudioError(Exception):
    pass


@pytest.fixture
def fake_sd():
    module = MagicMock()
    module.PortAudioError = FakePortAudioError
    with patch.dict(sys.modules, {"sounddevice": module}):
        yield module


class TestStaticAuthorizer:
    async def test_default_is_authorized(self):
        assert await StaticAuthorizer().request_authorization() == AuthorizationStatus.authorized

    async def test_fixed_status(self):
        authorizer = StaticAuthorizer(AuthorizationStatus.restricted)
        assert await authorizer.request_authorization() == AuthorizationStatus.restricted


class TestDeviceAuthorizer:
    """Status is derived from what PortAudio reports about the input device."""

    async def test_input_device_available(self, fake_sd):
        fake_sd.query_devices.return_value = {"name": "Built-in Mic", "max_input_channels": 2}
        status = await DeviceAuthorizer().request_authorization()
        assert status == AuthorizationStatus.authorized
        fake_sd.query_devices.assert_called_once_with(None, "input")

    async def test_device_without_inputs(self, fake_sd):
        fake_sd.query_devices.return_value = {"name": "HDMI", "max_input_channels": 0}
        assert await DeviceAuthorizer(device=1).request_authorization() == (
            AuthorizationStatus.restricted
        )

    async def test_no_default_device(self, fake_sd):
        fake_sd.query_devices.side_effect = ValueError("No input device matching")
        assert await DeviceAuthorizer().request_authorization() == (
            AuthorizationStatus.restricted
        )

    async def test_host_error(self, fake_sd):
        fake_sd.query_devices.side_effect = FakePortAudioError("Error querying device -1")
        assert await DeviceAuthorizer().request_authorization() == AuthorizationStatus.denied

    def test_portaudio_missing(self):
        # sounddevice raises OSError at import time when PortAudio cannot be loaded
        with patch("builtins.__import__", side_effect=_fail_sounddevice_import):
            status = DeviceAuthorizer()._query_devices()
        assert status == AuthorizationStatus.denied


_real_import = __import__


def _fail_sounddevice_import(name, *args, **kwargs):
    if name == "sounddevice":
        raise OSError("PortAudio library not found")
    return _real_import(name, *args, **kwargs)


class TestCreateAuthorizer:
    def test_device_mode_parses_index(self):
        authorizer = create_authorizer("device", device="4")
        assert isinstance(authorizer, DeviceAuthorizer)
        assert authorizer._device == 4

    async def test_granted_mode(self):
        authorizer = create_authorizer("granted")
        assert await authorizer.request_authorization() == AuthorizationStatus.authorized

    async def test_denied_mode(self):
        authorizer = create_authorizer("denied")
        assert await authorizer.request_authorization() == AuthorizationStatus.denied

    def test_unknown_mode(self):
        with pytest.raises(ValueError, match="Unknown authorization mode"):
            create_authorizer("prompt")

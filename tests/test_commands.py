from __future__ import annotations

import dataclasses

import pytest
from fakes import FakeBackend

from pysecurehome.client import SecureHomeClient
from pysecurehome.config import SecureHomeConfig
from pysecurehome.exceptions import AuthError, CommandError, PreconditionError
from pysecurehome.models.state import ArmingState

ARM = "/device/armSite"
SYNC = "/device/getSyncInfo"
STATE = "/device/getStateInfo"


@pytest.mark.asyncio
async def test_requesting_current_state_sends_nothing(config: SecureHomeConfig, backend: FakeBackend) -> None:
    async with SecureHomeClient(config, transport=backend) as client:
        await client.start()
        calls_before = len(backend.calls)

        error = await client.request_arming_state(ArmingState.DISARMED)

        assert error is None
        assert len(backend.calls) == calls_before
        assert client.target_state is None


@pytest.mark.asyncio
async def test_not_ready_with_fault_refuses_to_arm(config: SecureHomeConfig) -> None:
    backend = FakeBackend(arming_state=3, fault_status=1)
    async with SecureHomeClient(config, transport=backend) as client:
        await client.start()

        error = await client.request_arming_state(ArmingState.ARMED_AWAY)

        assert isinstance(error, PreconditionError)
        assert backend.count(ARM) == 0


@pytest.mark.asyncio
async def test_not_ready_without_fault_still_arms(config: SecureHomeConfig) -> None:
    backend = FakeBackend(arming_state=3, fault_status=0)
    async with SecureHomeClient(config, transport=backend) as client:
        await client.start()

        error = await client.request_arming_state(ArmingState.ARMED_AWAY)

        assert error is None
        assert backend.count(ARM) == 1


@pytest.mark.asyncio
async def test_arm_away_resyncs_cache(config: SecureHomeConfig, backend: FakeBackend) -> None:
    async with SecureHomeClient(config, transport=backend) as client:
        await client.start()
        assert backend.count(SYNC) == 1
        assert backend.count(STATE) == 1

        error = await client.request_arming_state(ArmingState.ARMED_AWAY)

        assert error is None
        assert backend.count(ARM) == 1
        assert backend.count(SYNC) == 2
        assert backend.count(STATE) == 2
        state = client.get_state()
        assert state is not None and state.alarm is not None
        assert state.alarm.arming_state is ArmingState.ARMED_AWAY

        payload = backend.payloads(ARM)[0]
        assert payload["arm"] is True
        assert payload["token"] == "T1"
        assert payload["userId"] == "7"
        assert payload["siteId"] == 42
        assert payload["clientImei"] == config.device.imei
        assert "stayProfileId" not in payload
        assert "pin" not in payload


@pytest.mark.asyncio
async def test_arm_stay_sends_partition_and_stay_profile(config: SecureHomeConfig, backend: FakeBackend) -> None:
    async with SecureHomeClient(config, transport=backend) as client:
        await client.start()

        error = await client.request_arming_state(ArmingState.ARMED_STAY)

        assert error is None
        payload = backend.payloads(ARM)[0]
        assert payload["stayProfileId"] == 293224
        assert payload["partitionId"] == 2261370
        state = client.get_state()
        assert state is not None and state.alarm is not None
        assert state.alarm.arming_state is ArmingState.ARMED_STAY


@pytest.mark.asyncio
async def test_configured_stay_profile_wins(config: SecureHomeConfig, backend: FakeBackend) -> None:
    config = dataclasses.replace(config, stay_profile_id=1001)
    async with SecureHomeClient(config, transport=backend) as client:
        await client.start()

        await client.request_arming_state(ArmingState.ARMED_STAY)

        assert backend.payloads(ARM)[0]["stayProfileId"] == 1001


@pytest.mark.asyncio
async def test_disarm_sends_keypad_pin(config: SecureHomeConfig) -> None:
    backend = FakeBackend(arming_state=1)
    async with SecureHomeClient(config, transport=backend) as client:
        await client.start()

        error = await client.request_arming_state(ArmingState.DISARMED)

        assert error is None
        payload = backend.payloads(ARM)[0]
        assert payload["arm"] is False
        assert payload["pin"] == "1234"
        assert payload["clientImei"] == payload["imei"] == config.device.imei


@pytest.mark.asyncio
async def test_disarm_without_pin_fails_before_network(config: SecureHomeConfig) -> None:
    config = dataclasses.replace(config, keypad_pin=None)
    backend = FakeBackend(arming_state=1)
    async with SecureHomeClient(config, transport=backend) as client:
        await client.start()

        error = await client.request_arming_state(ArmingState.DISARMED)

        assert isinstance(error, PreconditionError)
        assert backend.count(ARM) == 0


@pytest.mark.asyncio
async def test_rejected_command_leaves_cache_untouched(config: SecureHomeConfig) -> None:
    backend = FakeBackend(arm_success=False)
    async with SecureHomeClient(config, transport=backend) as client:
        before = await client.start()

        error = await client.request_arming_state(ArmingState.ARMED_AWAY)

        assert isinstance(error, CommandError)
        assert "Arm operation failed" in str(error)
        assert client.get_state() is before
        assert backend.count(STATE) == 1
        assert client.target_state is None


@pytest.mark.asyncio
async def test_transport_failure_is_returned_as_command_error(
    config: SecureHomeConfig, backend: FakeBackend
) -> None:
    async with SecureHomeClient(config, transport=backend) as client:
        await client.start()
        backend.fail_endpoints.add(ARM)

        error = await client.request_arming_state(ArmingState.ARMED_AWAY)

        assert isinstance(error, CommandError)
        assert backend.count(STATE) == 1


@pytest.mark.asyncio
async def test_failed_resync_is_reported_to_recovery(config: SecureHomeConfig, backend: FakeBackend) -> None:
    async with SecureHomeClient(config, transport=backend) as client:
        await client.start()
        signals: list[BaseException] = []
        client.recovery.add_listener(signals.append)
        backend.fail_endpoints.add(STATE)

        error = await client.request_arming_state(ArmingState.ARMED_AWAY)

        assert error is None
        assert backend.count(ARM) == 1
        assert client.get_state() is None
        assert len(signals) == 1
        assert client.recovery.pending


@pytest.mark.asyncio
async def test_unrequestable_state_is_rejected(config: SecureHomeConfig, backend: FakeBackend) -> None:
    async with SecureHomeClient(config, transport=backend) as client:
        await client.start()

        with pytest.raises(ValueError):
            await client.request_arming_state(ArmingState.NOT_READY)
        assert backend.count(ARM) == 0


@pytest.mark.asyncio
async def test_direct_arm_without_session_raises(config: SecureHomeConfig, backend: FakeBackend) -> None:
    async with SecureHomeClient(config, transport=backend) as client:
        with pytest.raises(AuthError):
            await client.arm_site(stay=True)
        assert backend.calls == []


@pytest.mark.asyncio
async def test_command_timeout_is_returned_as_command_error(
    config: SecureHomeConfig, backend: FakeBackend
) -> None:
    async with SecureHomeClient(config, transport=backend) as client:
        before = await client.start()
        backend.raise_once[ARM] = TimeoutError()

        error = await client.request_arming_state(ArmingState.ARMED_AWAY)

        assert isinstance(error, CommandError)
        assert isinstance(error.__cause__, TimeoutError)
        assert client.get_state() is before
        assert backend.count(STATE) == 1
        assert client.target_state is None


@pytest.mark.asyncio
async def test_resync_timeout_is_reported_to_recovery(config: SecureHomeConfig, backend: FakeBackend) -> None:
    async with SecureHomeClient(config, transport=backend) as client:
        await client.start()
        signals: list[BaseException] = []
        client.recovery.add_listener(signals.append)
        backend.raise_once[STATE] = TimeoutError()

        error = await client.request_arming_state(ArmingState.ARMED_AWAY)

        assert error is None
        assert client.get_state() is None
        assert len(signals) == 1
        assert isinstance(signals[0], TimeoutError)
        assert client.recovery.pending

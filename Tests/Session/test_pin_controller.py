"""
Tests for the PIN authentication state machine.
"""

import asyncio
import random
from unittest.mock import AsyncMock

import pytest

from passport_vault.navigation.navigation_serializer import TransitionMode
from passport_vault.Session.pin_controller import PinAuthenticationController
from passport_vault.Session.pin_entry import PinBuffer, PinSettings, PinState


def _type(controller, digits):
    for digit in digits:
        controller.on_digit(digit)


@pytest.fixture
def authenticate():
    return AsyncMock(return_value=False)


@pytest.fixture
def controller(authenticate, navigator, fast_pin_settings, feedback):
    return PinAuthenticationController(
        authenticate,
        navigator,
        settings=fast_pin_settings,
        feedback=feedback,
    )


class TestPinBuffer:

    def test_never_exceeds_max_length(self):
        buffer = PinBuffer(4)
        for digit in "123456":
            buffer.append(digit)
        assert len(buffer) == 4
        assert buffer.value == "1234"

    def test_pop_on_empty_buffer_is_noop(self):
        buffer = PinBuffer(4)
        assert buffer.pop() is False
        assert len(buffer) == 0

    @pytest.mark.parametrize("value", ["1", "0", "9"])
    def test_accepts_single_decimal_digits(self, value):
        assert PinBuffer.is_digit(value) is True

    @pytest.mark.parametrize("value", ["a", "12", "", " ", "٣", 1, None])
    def test_rejects_everything_else(self, value):
        assert PinBuffer.is_digit(value) is False

    def test_repr_hides_digits(self):
        buffer = PinBuffer(4)
        buffer.append("7")
        assert "7" not in repr(buffer).replace("max_length=4", "")


class TestDigitEntry:

    @pytest.mark.asyncio
    async def test_digits_append_while_entering(self, controller):
        _type(controller, "12")

        assert controller.state is PinState.ENTERING
        assert controller.pin_length == 2

    @pytest.mark.asyncio
    async def test_invalid_input_is_ignored(self, controller, authenticate):
        _type(controller, ["x", "12", "", "#"])

        assert controller.pin_length == 0
        assert controller.state is PinState.ENTERING
        authenticate.assert_not_called()

    @pytest.mark.asyncio
    async def test_backspace_removes_last_digit(self, controller):
        _type(controller, "123")
        controller.on_backspace()

        assert controller.buffer.value == "12"

    @pytest.mark.asyncio
    async def test_backspace_on_empty_buffer_is_noop(self, controller):
        controller.on_backspace()

        assert controller.pin_length == 0
        assert controller.state is PinState.ENTERING

    @pytest.mark.asyncio
    async def test_fourth_digit_moves_to_validating(self, controller, authenticate):
        _type(controller, "1234")

        assert controller.state is PinState.VALIDATING
        # Validation is scheduled, not run inline.
        authenticate.assert_not_called()
        await controller.join()

    @pytest.mark.asyncio
    async def test_input_ignored_while_validating(self, controller, authenticate):
        gate = asyncio.Event()

        async def slow_authenticate(secret):
            await gate.wait()
            return False

        authenticate.side_effect = slow_authenticate
        _type(controller, "1234")
        await asyncio.sleep(0.01)
        assert controller.state is PinState.VALIDATING

        controller.on_digit("5")
        controller.on_backspace()
        assert controller.buffer.value == "1234"

        gate.set()
        await controller.join()
        authenticate.assert_awaited_once_with("1234")

    @pytest.mark.asyncio
    async def test_buffer_length_stays_in_bounds_for_random_input(self, authenticate, navigator, fast_pin_settings):
        rng = random.Random(1234)
        lengths = []
        controller = PinAuthenticationController(
            authenticate,
            navigator,
            settings=fast_pin_settings,
            on_change=lambda c: lengths.append(c.pin_length),
        )

        for _ in range(200):
            if rng.random() < 0.7:
                controller.on_digit(str(rng.randint(0, 9)))
            else:
                controller.on_backspace()
            lengths.append(controller.pin_length)
            if controller.state is not PinState.ENTERING:
                await controller.join()

        assert all(0 <= length <= 4 for length in lengths)


class TestValidation:

    @pytest.mark.asyncio
    async def test_correct_pin_is_accepted(self, controller, authenticate, navigator, recording_router):
        authenticate.return_value = True

        _type(controller, "1234")
        await controller.join()
        await navigator.join()

        authenticate.assert_awaited_once_with("1234")
        assert controller.state is PinState.ACCEPTED
        assert controller.failed_attempt_count == 0
        assert recording_router.calls == [("vault", TransitionMode.REPLACE)]

    @pytest.mark.asyncio
    async def test_accepted_is_terminal(self, controller, authenticate, navigator, recording_router):
        authenticate.return_value = True
        _type(controller, "1234")
        await controller.join()

        _type(controller, "5678")
        controller.on_backspace()
        await controller.join()
        await navigator.join()

        assert controller.state is PinState.ACCEPTED
        assert authenticate.await_count == 1
        assert recording_router.destinations == ["vault"]

    @pytest.mark.asyncio
    async def test_rejected_pin_counts_and_clears(self, controller, authenticate, feedback, navigator, recording_router):
        _type(controller, "0000")
        await controller.join()

        assert controller.failed_attempt_count == 1
        assert controller.state is PinState.ENTERING
        assert controller.pin_length == 0
        feedback.haptic.assert_called_once()
        feedback.shake.assert_called_once_with((1, -1, 0), 0)
        await navigator.join()
        assert recording_router.calls == []

    @pytest.mark.asyncio
    async def test_n_rejections_count_n(self, controller, authenticate):
        for attempt in range(1, 6):
            _type(controller, "9999")
            await controller.join()
            assert controller.failed_attempt_count == attempt
            assert controller.pin_length == 0

        # No cap: still accepting input after many failures.
        _type(controller, "1")
        assert controller.pin_length == 1

    @pytest.mark.asyncio
    async def test_authenticate_exception_is_a_rejection(self, controller, authenticate):
        authenticate.side_effect = RuntimeError("store unavailable")

        _type(controller, "1234")
        await controller.join()

        assert controller.failed_attempt_count == 1
        assert controller.state is PinState.ENTERING

    @pytest.mark.asyncio
    async def test_non_boolean_truthy_result_is_a_rejection(self, controller, authenticate):
        authenticate.return_value = "yes"

        _type(controller, "1234")
        await controller.join()

        assert controller.state is PinState.ENTERING
        assert controller.failed_attempt_count == 1

    @pytest.mark.asyncio
    async def test_input_ignored_during_feedback_window(self, authenticate, navigator, feedback):
        settings = PinSettings(validation_delay=0, feedback_window=0.05)
        controller = PinAuthenticationController(authenticate, navigator, settings=settings, feedback=feedback)

        _type(controller, "0000")
        await asyncio.sleep(0.02)
        assert controller.state is PinState.REJECTED

        controller.on_digit("1")
        assert controller.pin_length == 4

        await controller.join()
        assert controller.pin_length == 0
        assert controller.state is PinState.ENTERING

    @pytest.mark.asyncio
    async def test_failing_feedback_does_not_break_rejection(self, controller, authenticate, feedback):
        feedback.haptic.side_effect = RuntimeError("no bell")

        _type(controller, "0000")
        await controller.join()

        assert controller.state is PinState.ENTERING
        assert controller.failed_attempt_count == 1

    @pytest.mark.asyncio
    async def test_wrong_then_right_resets_counter(self, controller, authenticate, navigator, recording_router):
        counts = []

        async def check(secret):
            return secret == "1234"

        authenticate.side_effect = check

        _type(controller, "0000")
        await controller.join()
        counts.append(controller.failed_attempt_count)

        _type(controller, "1234")
        await controller.join()
        counts.append(controller.failed_attempt_count)
        await navigator.join()

        assert counts == [1, 0]
        assert controller.state is PinState.ACCEPTED
        assert recording_router.destinations == ["vault"]

    @pytest.mark.asyncio
    async def test_on_accepted_callback_runs_once(self, authenticate, navigator, fast_pin_settings):
        authenticate.return_value = True
        accepted = []
        controller = PinAuthenticationController(
            authenticate, navigator, settings=fast_pin_settings, on_accepted=lambda: accepted.append(True)
        )

        _type(controller, "4321")
        await controller.join()

        assert accepted == [True]

    @pytest.mark.asyncio
    async def test_cancel_abandons_pending_validation(self, controller, authenticate):
        _type(controller, "1234")
        controller.cancel()
        await asyncio.sleep(0.01)

        authenticate.assert_not_called()

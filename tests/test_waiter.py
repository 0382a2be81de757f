"""Tests for the image build status waiter."""

import pytest

from imagebuilder_ops.core.aws.waiter import image_status_available
from imagebuilder_ops.utils.exceptions import UnexpectedStateError, WaiterTimeoutError

from conftest import IMAGE_ARN, image_payload, not_found


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds

    def __call__(self):
        return self.now


def wait(manager, clock, **kwargs):
    options = {"timeout": 300, "poll_interval": 30}
    options.update(kwargs)
    return image_status_available(manager, IMAGE_ARN, sleep=clock.sleep, clock=clock, **options)


def test_returns_image_once_available(manager, client):
    client.get_image.side_effect = [
        {"image": image_payload("PENDING")},
        {"image": image_payload("BUILDING")},
        {"image": image_payload("TESTING")},
        {"image": image_payload("AVAILABLE")},
    ]
    clock = FakeClock()
    image = wait(manager, clock)
    assert image["state"]["status"] == "AVAILABLE"
    assert clock.sleeps == [30, 30, 30]
    client.get_image.assert_called_with(imageBuildVersionArn=IMAGE_ARN)


def test_initial_delay(manager, client):
    client.get_image.return_value = {"image": image_payload("AVAILABLE")}
    clock = FakeClock()
    wait(manager, clock, delay=10)
    assert clock.sleeps == [10]


def test_failed_build_raises_with_reason(manager, client):
    client.get_image.side_effect = [
        {"image": image_payload("BUILDING")},
        {"image": image_payload(state={"status": "FAILED", "reason": "component failed"})},
    ]
    with pytest.raises(UnexpectedStateError) as exc:
        wait(manager, FakeClock())
    assert exc.value.status == "FAILED"
    assert exc.value.reason == "component failed"
    assert "component failed" in str(exc.value)


def test_cancelled_build_raises(manager, client):
    client.get_image.return_value = {"image": image_payload("CANCELLED")}
    with pytest.raises(UnexpectedStateError, match="CANCELLED"):
        wait(manager, FakeClock())


def test_timeout_reports_last_status(manager, client):
    client.get_image.return_value = {"image": image_payload("DISTRIBUTING")}
    clock = FakeClock()
    with pytest.raises(WaiterTimeoutError) as exc:
        wait(manager, clock, timeout=100)
    assert exc.value.last_status == "DISTRIBUTING"
    assert sum(clock.sleeps) == 100
    assert clock.sleeps[-1] == 10


def test_not_found_is_tolerated_briefly(manager, client):
    client.get_image.side_effect = [
        not_found(),
        not_found(),
        {"image": image_payload("AVAILABLE")},
    ]
    image = wait(manager, FakeClock(), not_found_checks=2)
    assert image["arn"] == IMAGE_ARN


def test_not_found_beyond_limit_raises(manager, client):
    client.get_image.side_effect = not_found()
    with pytest.raises(UnexpectedStateError, match="NOT_FOUND"):
        wait(manager, FakeClock(), not_found_checks=2)
    assert client.get_image.call_count == 3

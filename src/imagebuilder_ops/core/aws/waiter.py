"""Image build status waiter.

Polls GetImage until the build reaches AVAILABLE, a terminal status, or the
deadline.
"""

import time
from typing import Any, Callable, Dict, Optional

from imagebuilder_ops.core.aws.imagebuilder import ImageBuilderManager
from imagebuilder_ops.core.constants import (
    DEFAULT_NOT_FOUND_CHECKS,
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_WAITER_DELAY_SECONDS,
    IMAGE_STATUS_AVAILABLE,
    IMAGE_STATUS_PENDING,
)
from imagebuilder_ops.utils.exceptions import (
    ResourceNotFoundError,
    UnexpectedStateError,
    WaiterTimeoutError,
)
from imagebuilder_ops.utils.logger import setup_logger

logger = setup_logger(__name__, "waiter.log")


def image_status(manager: ImageBuilderManager, arn: str) -> Dict[str, Any]:
    """Return ``{"image", "status", "reason"}``; status is "" while not found."""
    try:
        image = manager.get_image(arn)
    except ResourceNotFoundError:
        return {"image": None, "status": "", "reason": None}
    state = image.get("state") or {}
    return {"image": image, "status": state.get("status", ""), "reason": state.get("reason")}


def image_status_available(
    manager: ImageBuilderManager,
    arn: str,
    timeout: float,
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
    delay: float = DEFAULT_WAITER_DELAY_SECONDS,
    not_found_checks: int = DEFAULT_NOT_FOUND_CHECKS,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> Dict[str, Any]:
    """Block until the image build ``arn`` is AVAILABLE and return the image.

    Args:
        manager: Image Builder manager used for GetImage
        arn: Image build version ARN
        timeout: Deadline in seconds
        poll_interval: Seconds between polls
        delay: Seconds to wait before the first poll
        not_found_checks: Consecutive not-found polls tolerated

    Raises:
        UnexpectedStateError: The build reached FAILED, CANCELLED or another
            status that is neither pending nor AVAILABLE
        WaiterTimeoutError: The deadline elapsed first
    """
    deadline = clock() + timeout
    last_status: Optional[str] = None
    not_found = 0

    if delay:
        sleep(delay)

    while True:
        result = image_status(manager, arn)
        status = result["status"]

        if status == IMAGE_STATUS_AVAILABLE:
            logger.info(f"Image {arn} is {status}")
            return result["image"]

        if not status:
            not_found += 1
            if not_found > not_found_checks:
                raise UnexpectedStateError(
                    arn, "NOT_FOUND", f"not found after {not_found_checks} checks"
                )
        elif status in IMAGE_STATUS_PENDING:
            not_found = 0
            if status != last_status:
                logger.info(f"Image {arn} is {status}")
        else:
            raise UnexpectedStateError(arn, status, result["reason"])

        last_status = status or last_status
        remaining = deadline - clock()
        if remaining <= 0:
            raise WaiterTimeoutError(arn, last_status, timeout)
        sleep(min(poll_interval, remaining))

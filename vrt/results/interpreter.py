"""
Interpretation of test-run responses.

This module turns a raw test-run response into a TestRunResult and
decides, based on the soft assert setting, whether the outcome should
be raised as a failure.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from ..errors import TestRunAssertionError
from .models import TestRunResponse, TestRunResult, TestRunStatus

logger = logging.getLogger(__name__)


class ResultInterpreter:
    """
    Maps test-run responses to results and applies the soft assert policy.

    With soft assert enabled every result is returned and the caller
    inspects ``status``. With it disabled anything other than OK raises
    TestRunAssertionError.

    Example:
        interpreter = ResultInterpreter(soft_assert=False)
        result = interpreter.interpret({
            "status": "ok", "url": "http://vrt/1", "imageName": "home.png",
        })
    """

    def __init__(self, soft_assert: bool = False):
        self.soft_assert = soft_assert

    def interpret(self, data: Mapping[str, Any] | TestRunResponse) -> TestRunResult:
        """
        Build a result from a response and raise if it counts as a failure.

        Raises:
            ProtocolError: If the response is malformed or the status is unknown
            TestRunAssertionError: If soft assert is off and status is not OK
        """
        response = data if isinstance(data, TestRunResponse) else TestRunResponse.from_dict(data)
        result = self.to_result(response)
        self.check(result)
        return result

    @staticmethod
    def to_result(response: TestRunResponse) -> TestRunResult:
        status = TestRunStatus.from_wire(response.status)
        url = response.url
        return TestRunResult(
            status=status,
            url=url,
            image_url=f"{url}/{response.image_name}",
            baseline_url=f"{url}/{response.baseline_name}" if response.baseline_name else None,
            diff_url=f"{url}/{response.diff_name}" if response.diff_name else None,
        )

    def check(self, result: TestRunResult) -> None:
        """Apply the soft assert policy to a result."""
        if result.status == TestRunStatus.OK:
            return

        if self.soft_assert:
            logger.warning(f"Test run {result.status.value}: {result.url}")
            return

        if result.status == TestRunStatus.NEW:
            message = f"No baseline: {result.url}"
        elif result.status == TestRunStatus.UNRESOLVED:
            message = f"Difference found: {result.url}"
        else:
            # approved, autoApproved and failed are not expected without soft assert
            message = "Unexpected status"
        raise TestRunAssertionError(message, result)

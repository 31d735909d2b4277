"""
Test run results and the soft assert policy.

Usage:
    from vrt.results import ResultInterpreter, TestRunStatus

    result = ResultInterpreter(soft_assert=True).interpret(response_data)
    if result.status != TestRunStatus.OK:
        print(result)
"""

from .interpreter import ResultInterpreter
from .models import TestRunResponse, TestRunResult, TestRunStatus

__all__ = [
    "ResultInterpreter",
    "TestRunResponse",
    "TestRunResult",
    "TestRunStatus",
]

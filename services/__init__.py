"""
Application services layer.

Services orchestrate business operations using repositories and domain services.
"""

from services.dinner_service import DinnerService
from services.scheduling_service import SchedulingService

# Result type for consistent error handling
from services.result import Result

__all__ = [
    # Concrete services
    "DinnerService",
    "SchedulingService",
    # Result type
    "Result",
]

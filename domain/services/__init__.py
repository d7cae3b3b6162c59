"""
Domain services containing pure business logic.
"""

from domain.services.candidate_builder import CandidateBuilder
from domain.services.schedule_evaluator import ScheduleEvaluator

__all__ = ["CandidateBuilder", "ScheduleEvaluator"]

"""Adaptive training engine: fatigue, deload, progression gate and advisor, suggestions."""

from app.adapt.deload import DeloadConfig, check_deload_needed, get_active_deload, start_deload
from app.adapt.fatigue import FatigueConfig, compute_fatigue, get_fatigue_status
from app.adapt.gate import GateConfig, check_progression_gate
from app.adapt.advisor import AdvisorConfig, get_progression_recommendation
from app.adapt.suggestion import SuggestionConfig, calculate_estimated_1rm, suggest_weight

__all__ = [
    "AdvisorConfig",
    "DeloadConfig",
    "FatigueConfig",
    "GateConfig",
    "SuggestionConfig",
    "calculate_estimated_1rm",
    "check_deload_needed",
    "check_progression_gate",
    "compute_fatigue",
    "get_active_deload",
    "get_fatigue_status",
    "get_progression_recommendation",
    "start_deload",
    "suggest_weight",
]

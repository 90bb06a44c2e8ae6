"""BandFlow edit planner: Gemini-generated edit plans for concert promo clips."""

from bandflow.helper import build_plan, build_plan_request
from bandflow.models import (
    AspectRatio,
    ClipDescriptor,
    EditPlan,
    EnergyLevel,
    MusicalFocus,
    ProjectConfiguration,
    Resolution,
    SceneSegment,
)

__all__ = [
    "build_plan",
    "build_plan_request",
    "AspectRatio",
    "ClipDescriptor",
    "EditPlan",
    "EnergyLevel",
    "MusicalFocus",
    "ProjectConfiguration",
    "Resolution",
    "SceneSegment",
]

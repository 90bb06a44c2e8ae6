"""
Domain models for a BandFlow edit project.
Project configuration, imported clips and the edit plan returned to the UI.
"""
import uuid
import zlib
from enum import Enum
from typing import Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from bandflow import constants
from bandflow.shared_utils.exceptions import InvalidRequest


class Resolution(str, Enum):
    TWO_K = "2K"
    FOUR_K = "4K"


class AspectRatio(str, Enum):
    PORTRAIT = "9:16"
    LANDSCAPE = "16:9"
    SQUARE = "1:1"


class MusicalFocus(str, Enum):
    VOCALS = "vocals"
    GUITAR_SOLOS = "guitar-solos"
    DRUMS = "drums"
    CROWD_ENERGY = "crowd-energy"


class EnergyLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ProjectConfiguration(BaseModel):
    """Desired output of the edit. Mutable, every assignment is validated."""
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    title: str = "New Band Promo"
    resolution: Resolution = Resolution.FOUR_K
    target_duration_seconds: int = Field(60, gt=0, alias="targetDuration")
    aspect_ratio: AspectRatio = Field(AspectRatio.PORTRAIT, alias="aspectRatio")
    musical_focus: MusicalFocus = Field(MusicalFocus.CROWD_ENERGY, alias="musicalFocus")
    # Reference to the logo image; only its presence matters to the plan
    watermark: Optional[str] = None

    @property
    def has_watermark(self) -> bool:
        return bool(self.watermark)


def _estimate_duration(name: str) -> float:
    return float(10 + zlib.crc32(name.encode("utf-8")) % 30)


def _estimate_energy(name: str) -> EnergyLevel:
    levels = list(EnergyLevel)
    return levels[zlib.adler32(name.encode("utf-8")) % len(levels)]


class ClipDescriptor(BaseModel):
    """A single imported source clip. Never mutated; remove and re-import instead."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    name: str
    duration_seconds: float = Field(..., ge=0, alias="duration")
    energy_level: EnergyLevel = Field(EnergyLevel.MEDIUM, alias="energyLevel")

    @classmethod
    def from_upload(
        cls,
        name: str,
        duration_seconds: Optional[float] = None,
        energy_level: Optional[EnergyLevel] = None,
    ) -> "ClipDescriptor":
        """
        Creates a descriptor for a freshly imported file.

        Without media analysis the duration and energy are estimated from the
        file name, so the same name always yields the same estimates.
        """
        return cls(
            id=uuid.uuid4().hex[:9],
            name=name,
            duration_seconds=_estimate_duration(name) if duration_seconds is None else duration_seconds,
            energy_level=_estimate_energy(name) if energy_level is None else energy_level,
        )


def add_clips(
    existing: Iterable[ClipDescriptor], new: Iterable[ClipDescriptor]
) -> Tuple[ClipDescriptor, ...]:
    """Appends newly imported clips, keeping the collection bounded and ids unique."""
    clips = tuple(existing) + tuple(new)
    if len(clips) > constants.MAX_CLIPS:
        raise InvalidRequest(f"At most {constants.MAX_CLIPS} clips can be imported, got {len(clips)}")
    ids = [clip.id for clip in clips]
    if len(set(ids)) != len(ids):
        raise InvalidRequest("Clip ids must be unique within a project")
    return clips


def remove_clip(clips: Iterable[ClipDescriptor], clip_id: str) -> Tuple[ClipDescriptor, ...]:
    return tuple(clip for clip in clips if clip.id != clip_id)


class SceneSegment(BaseModel):
    """One cut of the final edit, taken from a source clip."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    clip_id: str = Field(..., alias="clipId")
    start_time_seconds: float = Field(..., ge=0, allow_inf_nan=False, alias="startTime")
    duration_seconds: float = Field(..., gt=0, allow_inf_nan=False, alias="duration")
    transition: str
    description: str


class EditPlan(BaseModel):
    """The ordered scene list plus a soundtrack recommendation."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    scenes: Tuple[SceneSegment, ...]
    soundtrack_note: str = Field(..., alias="soundtrackEnhancement")
    # Set when the plan was synthesized locally instead of generated
    is_fallback: bool = Field(False, exclude=True)

    @property
    def total_duration_seconds(self) -> float:
        return sum(scene.duration_seconds for scene in self.scenes)

from dataclasses import dataclass
from typing import List, Type, Union

from pydantic import BaseModel, ConfigDict, Field

from bandflow.models import ClipDescriptor, ProjectConfiguration


class SceneSchema(BaseModel):
    model_config = ConfigDict(strict=True, allow_inf_nan=False)

    clipId: str = Field(description="The id of the source clip this scene is cut from, exactly as given in the footage list.")
    startTime: float = Field(description="Start time within the source clip, in seconds.")
    duration: float = Field(description="Length of this scene in the final edit, in seconds.")
    transition: str = Field(description="The transition into this scene, e.g. jump-cut, cross-dissolve or hard-cut.")
    description: str = Field(description="Why this moment was picked and what happens on screen.")


class EditPlanResponseSchema(BaseModel):
    model_config = ConfigDict(strict=True)

    scenes: List[SceneSchema] = Field(description="Scenes of the final edit in playback order.")
    soundtrackEnhancement: str = Field(description="The audio mix recommendation for the whole edit.")


@dataclass(frozen=True)
class PlanRequest:
    """Everything the generator needs for one edit plan call."""
    system_instruction: str
    user_instruction: str
    response_schema: Type[BaseModel] = EditPlanResponseSchema


# Outcomes of a single generation attempt

@dataclass(frozen=True)
class Success:
    payload: str


@dataclass(frozen=True)
class CredentialMissing:
    reason: str


@dataclass(frozen=True)
class TransportFailure:
    reason: str


@dataclass(frozen=True)
class MalformedPayload:
    reason: str
    payload: str = ""


GenerationOutcome = Union[Success, CredentialMissing, TransportFailure, MalformedPayload]


class EditPlanRequestSchema(BaseModel):
    """Body of a plan request sent by the UI."""
    project: ProjectConfiguration = Field(default_factory=ProjectConfiguration)
    clips: List[ClipDescriptor] = Field(default_factory=list)

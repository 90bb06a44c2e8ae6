import json
import logging
from typing import Any, Optional, Sequence

from bandflow import constants
from bandflow.gemini_helper import gemini_generate_edit_plan
from bandflow.models import ClipDescriptor, EditPlan, ProjectConfiguration
from bandflow.schemas import (
    CredentialMissing,
    EditPlanResponseSchema,
    GenerationOutcome,
    MalformedPayload,
    PlanRequest,
    Success,
    TransportFailure,
)
from bandflow.shared_utils.exceptions import GenerationFailure, InvalidRequest, MissingCredential
from bandflow.validator import resolve_edit_plan

logger = logging.getLogger(__name__)


def _summarize_clips(clips: Sequence[ClipDescriptor]) -> str:
    return json.dumps([
        {
            "id": clip.id,
            "name": clip.name,
            "inferredEnergy": clip.energy_level.value,
            "duration": clip.duration_seconds,
        }
        for clip in clips
    ])


def build_plan_request(config: ProjectConfiguration, clips: Sequence[ClipDescriptor]) -> PlanRequest:
    """Builds the instructions and response schema for one plan request. No I/O."""
    if not clips:
        raise InvalidRequest("At least one clip is required to request an edit plan.")
    if len(clips) > constants.MAX_CLIPS:
        raise InvalidRequest(f"At most {constants.MAX_CLIPS} clips are supported, got {len(clips)}.")
    ids = [clip.id for clip in clips]
    if len(set(ids)) != len(ids):
        raise InvalidRequest("Clip ids must be unique.")

    system_instruction = constants.SYSTEM_INSTRUCTION.format(
        musical_focus=config.musical_focus.value,
    )
    branding_rule = (
        constants.BRANDING_RULE_WITH_WATERMARK if config.has_watermark
        else constants.BRANDING_RULE_WITHOUT_WATERMARK
    )
    user_instruction = constants.EDIT_PLAN_PROMPT.format(
        title=config.title,
        resolution=config.resolution.value,
        aspect_ratio=config.aspect_ratio.value,
        target_duration=config.target_duration_seconds,
        clip_summary=_summarize_clips(clips),
        jump_cut=constants.JUMP_CUT,
        cross_dissolve=constants.CROSS_DISSOLVE,
        branding_rule=branding_rule,
    )
    return PlanRequest(
        system_instruction=system_instruction,
        user_instruction=user_instruction,
        response_schema=EditPlanResponseSchema,
    )


async def request_edit_plan(
    request: PlanRequest,
    api_key: Optional[str] = None,
    client: Any = None,
) -> GenerationOutcome:
    """Runs the generator once and tags whatever comes back."""
    try:
        payload = await gemini_generate_edit_plan(request, api_key=api_key, client=client)
    except MissingCredential as e:
        return CredentialMissing(reason=str(e))
    except GenerationFailure as e:
        return TransportFailure(reason=str(e))

    try:
        json.loads(payload)
    except (ValueError, RecursionError) as e:
        return MalformedPayload(reason=f"Response is not valid JSON: {e}", payload=payload)
    return Success(payload=payload)


async def build_plan(
    config: ProjectConfiguration,
    clips: Sequence[ClipDescriptor],
    *,
    api_key: Optional[str] = None,
    client: Any = None,
) -> EditPlan:
    """
    Returns an edit plan for the given project and clips.

    Generation is best effort: when Gemini is unavailable or its answer is
    unusable, an evenly split hard-cut plan is returned instead.

    Raises:
        InvalidRequest: no clips, too many clips, or duplicate clip ids
    """
    clips = tuple(clips)
    request = build_plan_request(config, clips)
    logger.info(f"Building edit plan for '{config.title}' from {len(clips)} clip(s).")
    outcome = await request_edit_plan(request, api_key=api_key, client=client)
    return resolve_edit_plan(outcome, config, clips)

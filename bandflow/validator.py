"""
Validation of generated edit plans.
Turns every generation outcome into a usable EditPlan, synthesizing a
deterministic fallback whenever the generated one can't be trusted.
"""

import logging
from typing import Sequence

from pydantic import ValidationError

from bandflow import constants
from bandflow.models import ClipDescriptor, EditPlan, ProjectConfiguration, SceneSegment
from bandflow.schemas import (
    CredentialMissing,
    EditPlanResponseSchema,
    GenerationOutcome,
    MalformedPayload,
    Success,
    TransportFailure,
)
from bandflow.shared_utils.exceptions import MalformedResponse

logger = logging.getLogger(__name__)


def parse_edit_plan(payload: str, clips: Sequence[ClipDescriptor]) -> EditPlan:
    """
    Parses a generated JSON payload into an EditPlan.

    Args:
        payload: raw JSON text returned by the generator
        clips: the clips the plan was requested for

    Raises:
        MalformedResponse: bad JSON, no scenes, missing or mistyped fields, unknown clip ids,
            negative or non-finite start times, non-positive or non-finite durations
    """
    try:
        parsed = EditPlanResponseSchema.model_validate_json(payload)
    except ValidationError as e:
        raise MalformedResponse(f"Payload does not match the edit plan schema: {e.error_count()} error(s)") from e

    if not parsed.scenes:
        raise MalformedResponse("Generated plan has no scenes")

    known_ids = {clip.id for clip in clips}
    scenes = []
    for i, scene in enumerate(parsed.scenes):
        if scene.clipId not in known_ids:
            raise MalformedResponse(f"Scene {i + 1} references unknown clip '{scene.clipId}'")
        try:
            scenes.append(SceneSegment(
                clip_id=scene.clipId,
                start_time_seconds=scene.startTime,
                duration_seconds=scene.duration,
                transition=scene.transition,
                description=scene.description,
            ))
        except ValidationError as e:
            raise MalformedResponse(f"Scene {i + 1} has invalid timing: {e.error_count()} error(s)") from e

    return EditPlan(scenes=tuple(scenes), soundtrack_note=parsed.soundtrackEnhancement)


def synthesize_fallback_plan(config: ProjectConfiguration, clips: Sequence[ClipDescriptor]) -> EditPlan:
    """One hard cut per clip, in input order, splitting the target length evenly."""
    scene_duration = config.target_duration_seconds / len(clips)
    scenes = tuple(
        SceneSegment(
            clip_id=clip.id,
            start_time_seconds=0,
            duration_seconds=scene_duration,
            transition=constants.HARD_CUT,
            description=constants.FALLBACK_SCENE_DESCRIPTION.format(clip_name=clip.name),
        )
        for clip in clips
    )
    return EditPlan(scenes=scenes, soundtrack_note=constants.FALLBACK_SOUNDTRACK_NOTE, is_fallback=True)


def resolve_edit_plan(
    outcome: GenerationOutcome,
    config: ProjectConfiguration,
    clips: Sequence[ClipDescriptor],
) -> EditPlan:
    """
    Accepts a generated plan or falls back. Never raises for a non-empty clip list.
    """
    if isinstance(outcome, Success):
        try:
            plan = parse_edit_plan(outcome.payload, clips)
        except MalformedResponse as e:
            outcome = MalformedPayload(reason=str(e), payload=outcome.payload)
        else:
            logger.info(f"Accepted generated edit plan with {len(plan.scenes)} scene(s).")
            return plan

    if isinstance(outcome, CredentialMissing):
        logger.warning(f"No Gemini credential, using fallback plan: {outcome.reason}")
    elif isinstance(outcome, TransportFailure):
        logger.warning(f"Generation failed, using fallback plan: {outcome.reason}")
    elif isinstance(outcome, MalformedPayload):
        logger.warning(f"Generated plan rejected, using fallback plan: {outcome.reason}")
    else:
        logger.error(f"Unknown generation outcome {outcome!r}, using fallback plan.")

    return synthesize_fallback_plan(config, clips)

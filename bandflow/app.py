import asyncio
import base64
import json
import os
from typing import Any, Dict

from aws_lambda_powertools import Logger
from pydantic import ValidationError

from bandflow import constants
from bandflow.helper import build_plan
from bandflow.models import EditPlan
from bandflow.schemas import EditPlanRequestSchema
from bandflow.shared_utils.common_response_utils import (
    bad_request_response,
    get_request_origin,
    method_not_allowed_response,
    options_response,
    server_error_response,
    success_response,
)
from bandflow.shared_utils.exceptions import InvalidRequest

logger = Logger(service=constants.SERVICE_NAME)


def _event_body(event: Dict[str, Any]):
    body = event.get("body")
    if event.get("isBase64Encoded") and isinstance(body, str):
        body = base64.b64decode(body, validate=True).decode("utf-8")
    return body

def _parse_payload(body):
    if isinstance(body, dict):
        return body
    if isinstance(body, str):
        return json.loads(body)
    return {}

def _request_method(event: Dict[str, Any]) -> str:
    method = event.get("httpMethod")
    if not method:
        method = event.get("requestContext", {}).get("http", {}).get("method", "POST")
    return method.upper()

def _plan_response_data(plan: EditPlan) -> Dict[str, Any]:
    return {"plan": plan, "fallback": plan.is_fallback}


def lambda_handler(event, context):
    origin = get_request_origin(event)
    method = _request_method(event)

    if method == "OPTIONS":
        return options_response(origin=origin)
    if method != "POST":
        return method_not_allowed_response(method=method, origin=origin)

    try:
        document = EditPlanRequestSchema.model_validate(_parse_payload(_event_body(event)))
    except json.JSONDecodeError as e:
        return bad_request_response("Request body is not valid JSON", dev_message=str(e), origin=origin)
    except ValidationError as e:
        return bad_request_response("Invalid project or clip data", dev_message=e.errors(include_url=False), origin=origin)
    except ValueError as e:
        return bad_request_response("Request body could not be decoded", dev_message=str(e), origin=origin)

    try:
        logger.info(f"Edit plan requested for '{document.project.title}' with {len(document.clips)} clip(s).")
        plan = asyncio.run(build_plan(document.project, document.clips))
    except InvalidRequest as e:
        return bad_request_response("Cannot build an edit plan from this input", dev_message=str(e), origin=origin)
    except Exception as e:
        logger.exception("Edit plan request failed")
        return server_error_response(exception=e, origin=origin)

    if plan.is_fallback:
        logger.warning("Returning fallback edit plan.")
    return success_response(data=_plan_response_data(plan), message="Edit plan generated", origin=origin)


async def main():
    payload_json = os.environ.get("PAYLOAD_JSON")
    if not payload_json:
        raise ValueError("Missing required environment variable PAYLOAD_JSON")

    document = EditPlanRequestSchema.model_validate(_parse_payload(payload_json))

    logger.info("=" * 60)
    logger.info("STARTING EDIT PLAN GENERATION")
    logger.info("=" * 60)
    logger.info(f"Project: {document.project.title}")
    logger.info(f"Clips: {len(document.clips)}")

    plan = await build_plan(document.project, document.clips)

    logger.info(f"Edit plan ready: {len(plan.scenes)} scene(s), {plan.total_duration_seconds:.1f}s, fallback={plan.is_fallback}")
    print(plan.model_dump_json(by_alias=True, indent=2))
    return plan

if __name__ == '__main__':
    asyncio.run(main())

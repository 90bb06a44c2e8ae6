import asyncio
import logging
from typing import Any, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from bandflow import constants
from bandflow.schemas import PlanRequest
from bandflow.shared_utils.exceptions import GenerationFailure, MissingCredential

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def _create_client(api_key: str) -> genai.Client:
    return genai.Client(
        api_key=api_key,
        http_options=types.HttpOptions(timeout=constants.GEMINI_TIMEOUT_MS),
    )


async def _close_client(client: Any) -> None:
    async_client = getattr(client, "aio", None)
    if async_client is not None and hasattr(async_client, "aclose"):
        try:
            await async_client.aclose()
        except Exception as e:
            logger.debug(f"Async client close error (ignored): {e}")
    if hasattr(client, "close"):
        try:
            client.close()
        except Exception as e:
            logger.warning(f"Sync client close error: {e}")


async def gemini_generate_edit_plan(
    request: PlanRequest,
    api_key: Optional[str] = None,
    client: Any = None,
) -> str:
    """
    Sends one structured-output request to Gemini and returns the raw JSON text.

    Exactly one generate_content call is made. There is no retry and no cache.

    Args:
        request: the instructions and response schema built for this project
        api_key: overrides the key resolved from the environment
        client: an existing genai.Client to reuse instead of creating one

    Raises:
        MissingCredential: no API key could be resolved; nothing is sent
        GenerationFailure: the call failed or the response carried no text
    """
    api_key = api_key if api_key is not None else constants.get_gemini_api_key()
    if not api_key:
        raise MissingCredential("Gemini API key not found. Set GEMINI_API_KEY or API_KEY.")

    owns_client = client is None

    try:
        if owns_client:
            client = _create_client(api_key)
        config = types.GenerateContentConfig(
            system_instruction=request.system_instruction,
            response_mime_type="application/json",
            response_schema=request.response_schema,
            temperature=constants.GEMINI_TEMPERATURE,
        )
        logger.info(f"Requesting edit plan from {constants.GEMINI_MODEL_NAME}...")
        response = await client.aio.models.generate_content(
            model=constants.GEMINI_MODEL_NAME,
            contents=request.user_instruction,
            config=config,
        )
    except genai_errors.ClientError as e:
        logger.error(f"Gemini rejected the request ({e.code}): {e}")
        raise GenerationFailure(f"Gemini rejected the request: {e}") from e
    except genai_errors.APIError as e:
        logger.error(f"Gemini service error ({e.code}): {e}")
        raise GenerationFailure(f"Gemini service error: {e}") from e
    except (httpx.HTTPError, asyncio.TimeoutError) as e:
        logger.error(f"Network error while calling Gemini: {e!r}")
        raise GenerationFailure(f"Network error while calling Gemini: {e!r}") from e
    except Exception as e:
        logger.error(f"Unexpected error while calling Gemini: {e!r}")
        raise GenerationFailure(f"Unexpected error while calling Gemini: {e!r}") from e
    finally:
        if owns_client and client is not None:
            await _close_client(client)

    text = getattr(response, "text", None)
    if not text:
        raise GenerationFailure("AI response was empty.")

    logger.info("Received edit plan response.")
    return text

import json
import logging
import traceback
from enum import Enum

from pydantic import BaseModel

from bandflow import constants

logger = logging.getLogger(__name__)


class PlanEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, BaseModel):
            return obj.model_dump(mode="json", by_alias=True)
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, (set, tuple)):
            return list(obj)
        return super().default(obj)

def get_request_origin(event):
    """Extract the origin from the Lambda event"""
    headers = event.get('headers', {}) or {}
    # API Gateway might have different header casing
    origin = headers.get('Origin') or headers.get('origin')
    return origin

def get_cors_headers(origin=None):
    """Get CORS headers for responses"""
    allowed_origins = [
        "http://localhost:5173",
        "https://localhost:5173",
        "http://localhost:3000",
    ]
    if constants.ENVIRONMENT == "prod":
        allowed_origins.append("https://bandflow.app")

    cors_origin = "http://localhost:5173"
    if origin and origin in allowed_origins:
        cors_origin = origin
    elif constants.ENVIRONMENT == "prod" and origin:
        # Unknown origins are rejected in production
        cors_origin = "null"

    return {
        "Content-Type": "application/json",
        "Access-Control-Allow-Origin": cors_origin,
        "Access-Control-Allow-Headers": "Content-Type,Authorization,X-Requested-With",
        "Access-Control-Allow-Methods": "POST,OPTIONS",
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Max-Age": "86400"
    }

def api_response(status_code, message, data=None, error=None, origin=None):
    """Base response wrapper with CORS headers"""
    response_body = {
        "status": status_code,
        "message": message,
        "data": data,
        "error": error if constants.ENVIRONMENT != "prod" else None
    }

    return {
        "statusCode": status_code,
        "headers": get_cors_headers(origin),
        "body": json.dumps(response_body, cls=PlanEncoder)
    }

def success_response(data=None, message="Request completed successfully", origin=None):
    logger.info(f"API Success: {message}")
    return api_response(200, message, data=data, origin=origin)

def bad_request_response(user_message="Invalid request", dev_message=None, origin=None):
    logger.warning(f"Bad Request: {user_message} | Details: {dev_message}")
    return api_response(
        400,
        user_message,
        error={
            "type": "BadRequest",
            "details": dev_message
        },
        origin=origin
    )

def method_not_allowed_response(method=None, origin=None):
    logger.warning(f"Method Not Allowed: {method}")
    return api_response(
        405,
        "Only POST is supported",
        error={
            "type": "MethodNotAllowed",
            "details": method
        },
        origin=origin
    )

def server_error_response(user_message="Oops! Something went wrong.", exception=None, origin=None):
    trace = traceback.format_exc() if exception else "Unknown server error"
    logger.error(f"Server Error: {user_message} | Exception: {trace}")
    return api_response(
        500,
        user_message,
        error={
            "type": "ServerError",
            "details": trace
        },
        origin=origin
    )

def options_response(origin=None):
    """Handle OPTIONS preflight requests"""
    return {
        "statusCode": 200,
        "headers": get_cors_headers(origin),
        "body": json.dumps({"message": "OK"})
    }

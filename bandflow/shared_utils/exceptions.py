"""Custom exception classes for the BandFlow edit planner."""

class EditPlanError(Exception):
    """Base class for edit plan generation errors."""
    pass

class InvalidRequest(EditPlanError):
    """Raised when a plan cannot be requested from the given input."""
    pass

class MissingCredential(EditPlanError):
    """Raised when no Gemini API key is configured."""
    pass

class GenerationFailure(EditPlanError):
    """Raised when the remote generation call fails or returns nothing."""
    pass

class MalformedResponse(EditPlanError):
    """Raised when a generated payload does not match the edit plan schema."""
    pass

import os

SERVICE_NAME = "bandflow-edit-planner"

ENVIRONMENT = os.environ.get("ENVIRONMENT", "dev").lower()

GEMINI_MODEL_NAME = os.environ.get("GEMINI_MODEL_NAME", "gemini-3-flash-preview")
GEMINI_TEMPERATURE = float(os.environ.get("GEMINI_TEMPERATURE", "0.4"))
GEMINI_TIMEOUT_MS = int(os.environ.get("GEMINI_TIMEOUT_MS", "120000"))

MAX_CLIPS = 10

# UI bounds for the target length slider, not enforced by the planner
TARGET_DURATION_MIN = 15
TARGET_DURATION_MAX = 120
TARGET_DURATION_STEP = 5

HARD_CUT = "hard-cut"
JUMP_CUT = "jump-cut"
CROSS_DISSOLVE = "cross-dissolve"

FALLBACK_SCENE_DESCRIPTION = "Automatic scene selection from {clip_name}"
FALLBACK_SOUNDTRACK_NOTE = "Balanced audio mix with slight bass boost for live feel."


def get_gemini_api_key() -> str:
    """Resolves the Gemini credential at call time."""
    return os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY") or ""


SYSTEM_INSTRUCTION = """You are a world-class AI Video Editor specialized in high-energy music concert promotion.
Your task is to analyze video metadata and create a frame-accurate edit plan.
Output MUST be valid JSON adhering to the provided schema.
Focus on {musical_focus} and ensure a build-up in energy."""

EDIT_PLAN_PROMPT = """Generate a professional edit plan for:
- Title: {title}
- Format: {resolution} @ {aspect_ratio}
- Target Length: {target_duration}s
- Footages: {clip_summary}

Requirements:
1. Use "Jump Cuts" ({jump_cut}) for high energy footage.
2. Use "Cross Dissolves" ({cross_dissolve}) for low energy footage and vocal moments.
3. Total duration of scenes must equal roughly {target_duration}s.
4. {branding_rule}"""

BRANDING_RULE_WITH_WATERMARK = "Ensure the band logo watermark is highlighted at the end of the sequence."
BRANDING_RULE_WITHOUT_WATERMARK = "Ensure the band branding is highlighted at the end of the sequence."

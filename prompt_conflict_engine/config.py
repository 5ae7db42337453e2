"""Configuration constants and environment variable loading for the conflict engine."""

import os
from dotenv import load_dotenv

load_dotenv()

# ==================== LOGGING ====================
LOG_LEVEL = os.getenv("PROMPT_ENGINE_LOG_LEVEL", "WARNING")

# ==================== SAMPLER ====================
_DEFAULT_SEED = os.getenv("PROMPT_ENGINE_SEED")
DEFAULT_SEED = int(_DEFAULT_SEED) if _DEFAULT_SEED else None

# Running style assertions at which the sampler switches to neutral presets
NEUTRAL_PRESET_THRESHOLD = int(os.getenv("NEUTRAL_PRESET_THRESHOLD", "5"))
NEUTRAL_PRESETS = ("raw", "filmlook")

# Accepted fraction of sampled selections that still carry an active conflict
SAMPLER_RESIDUAL_TOLERANCE = float(os.getenv("SAMPLER_RESIDUAL_TOLERANCE", "0.02"))

# Swap magic subjects for their safe alternatives (models with strict content policies)
SAFE_MODE = os.getenv("PROMPT_ENGINE_SAFE_MODE", "false").lower() in ("1", "true", "yes")

# Shared style tags between director and atmosphere before the atmosphere is de-prioritized
ATMOSPHERE_OVERLAP_LIMIT = 2

# ==================== STYLE STACKING ====================
# Number of independent dimensions asserting one style category before it counts as overloaded
STYLE_OVERLOAD_THRESHOLD = int(os.getenv("STYLE_OVERLOAD_THRESHOLD", "2"))

# ==================== DEFAULTS ====================
DEFAULT_CONFIG = {
    "log_level": LOG_LEVEL,
    "seed": DEFAULT_SEED,
    "style_overload_threshold": STYLE_OVERLOAD_THRESHOLD,
    "neutral_preset_threshold": NEUTRAL_PRESET_THRESHOLD,
    "neutral_presets": NEUTRAL_PRESETS,
    "atmosphere_overlap_limit": ATMOSPHERE_OVERLAP_LIMIT,
    "sampler_residual_tolerance": SAMPLER_RESIDUAL_TOLERANCE,
    "safe_mode": SAFE_MODE,
    "rate_trials": int(os.getenv("PROMPT_ENGINE_RATE_TRIALS", "1000")),
}

# Utils module for Minigame AutoFish

from .path_helpers import get_app_dir, get_model_dir
from .timing import now_ms, random_delay_ms, humanized_delay_ms, jitter_ms
from .validators import (
    validate_delay_range,
    validate_positive_number,
    validate_bite_confirmation,
    sanitize_cycle_settings,
)

__all__ = [
    'get_app_dir',
    'get_model_dir',
    'now_ms',
    'random_delay_ms',
    'humanized_delay_ms',
    'jitter_ms',
    'validate_delay_range',
    'validate_positive_number',
    'validate_bite_confirmation',
    'sanitize_cycle_settings',
]

# Copyright (C) 2026 BPS
# This file is part of Minigame AutoFish.
#
# Validation utilities for delay ranges, thresholds and setting values

import logging

logger = logging.getLogger('AutoFish')

DELAY_RANGES = (
    ('reel_delay_min_ms', 'reel_delay_max_ms'),
    ('recast_cooldown_min_ms', 'recast_cooldown_max_ms'),
    ('cast_delay_min_ms', 'cast_delay_max_ms'),
)

POSITIVE_KEYS = (
    'radius',
    'tick_rate_hz',
    'log_every_n_ticks',
    'fish_move_local_range',
    'fish_move_world_range',
    'history_size',
    'err_hi',
    'bite_drop_thr',
    'bite_window_ticks',
    'training_epochs',
    'learning_rate',
)

NON_NEGATIVE_KEYS = (
    'err_lo',
    'min_press_ticks',
    'min_release_ticks',
    'jitter_ms',
    'bite_arm_ticks',
    'bite_min_ticks_after_cast',
    'cast_spawn_grace_ticks',
    'cast_resolve_extra_ticks',
    'no_bite_timeout_ticks',
    'spawn_window_ticks',
    'classify_min_ticks',
)

BITE_CONFIRMATION_MODES = ('either', 'both')


def validate_delay_range(min_ms, max_ms):
    """Validate a humanized delay range in milliseconds

    Reversed bounds are accepted (they get swapped when drawing), negative
    or non-numeric values are not.
    """
    try:
        lo, hi = int(min_ms), int(max_ms)
    except (ValueError, TypeError):
        return False
    return lo >= 0 and hi >= 0


def validate_positive_number(value):
    """Validate a strictly positive int/float (bools are rejected)"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return value > 0


def validate_non_negative_number(value):
    """Validate a zero or positive int/float (bools are rejected)"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return value >= 0


def validate_bite_confirmation(mode):
    """Validate the bite confirmation policy name"""
    return mode in BITE_CONFIRMATION_MODES


def validate_hysteresis_bands(err_lo, err_hi):
    """The release band must sit below the press band"""
    if not validate_non_negative_number(err_lo) or not validate_positive_number(err_hi):
        return False
    return err_lo < err_hi


def sanitize_cycle_settings(settings, defaults):
    """Replace invalid values in a flattened settings dict with defaults

    Args:
        settings: Flattened settings dict (as built by SettingsManager)
        defaults: Flattened default settings dict

    Returns:
        New dict with every invalid entry replaced by its default
    """
    clean = dict(defaults)
    clean.update(settings)

    for lo_key, hi_key in DELAY_RANGES:
        if not validate_delay_range(clean.get(lo_key), clean.get(hi_key)):
            logger.warning(f"Invalid delay range {lo_key}/{hi_key}, using defaults")
            clean[lo_key] = defaults[lo_key]
            clean[hi_key] = defaults[hi_key]

    for key in POSITIVE_KEYS:
        if not validate_positive_number(clean.get(key)):
            logger.warning(f"Invalid {key}: {clean.get(key)!r}, using default")
            clean[key] = defaults[key]

    for key in NON_NEGATIVE_KEYS:
        if not validate_non_negative_number(clean.get(key)):
            logger.warning(f"Invalid {key}: {clean.get(key)!r}, using default")
            clean[key] = defaults[key]

    if not validate_hysteresis_bands(clean.get('err_lo'), clean.get('err_hi')):
        logger.warning("Invalid hysteresis bands, using defaults")
        clean['err_lo'] = defaults['err_lo']
        clean['err_hi'] = defaults['err_hi']

    if not validate_bite_confirmation(clean.get('bite_confirmation')):
        logger.warning(f"Invalid bite_confirmation: {clean.get('bite_confirmation')!r}, using default")
        clean['bite_confirmation'] = defaults['bite_confirmation']

    return clean

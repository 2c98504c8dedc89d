# Copyright (C) 2026 BPS
# This file is part of Minigame AutoFish.
#
# Default configuration values and tuning constants

# General behaviour (user facing)
DEFAULT_GENERAL_SETTINGS = {
    "radius": 14.0,
    "auto_loop": True,
    "humanize_delays": True,
    "reel_delay_min_ms": 110,
    "reel_delay_max_ms": 360,
    "recast_cooldown_min_ms": 250,
    "recast_cooldown_max_ms": 700,
    # "either": heuristic OR splash cue reels, "both": both must agree
    "bite_confirmation": "either",
    "tick_rate_hz": 20,
}

DEFAULT_LOG_SETTINGS = {
    "chat_log": True,
    "log_every_n_ticks": 5,
    "log_level": "INFO",
}

DEFAULT_TRAINING_SETTINGS = {
    "use_default_model": True,
    "training_mode": False,
    "model_dir": None,  # None -> <app dir>/config/autofish
}

# Tuning constants for the known minigame layout
DEFAULT_ADVANCED_SETTINGS = {
    # Session detection / classification
    "spawn_window_ticks": 16,
    "classify_min_ticks": 6,
    "min_candidates": 4,
    "fish_move_local_range": 0.12,
    "fish_move_world_range": 0.18,
    "history_size": 5,
    # Control
    "err_hi": 0.15,
    "err_lo": 0.05,
    "min_press_ticks": 4,
    "min_release_ticks": 3,
    "jitter_ms": 30,
    "invert_error": False,
    # Loop timing
    "cast_delay_min_ms": 120,
    "cast_delay_max_ms": 380,
    "fail_retry_delay_ms": 500,
    "no_rod_retry_delay_ms": 750,
    "poll_delay_ms": 60,
    "reel_grace_ms": 120,
    "cast_spawn_grace_ticks": 12,
    "cast_resolve_extra_ticks": 28,
    "no_bite_timeout_ticks": 60 * 20,
    # Bite detection
    "bite_arm_ticks": 40,
    "bite_min_ticks_after_cast": 10,
    "bite_vel_down_thr": -0.14,
    "bite_drop_thr": 0.20,
    "bite_window_ticks": 3,
    "settle_step_thr": 0.06,
    "settle_range_thr": 0.12,
    "joint_confirmation_window_ticks": 10,
    # Training
    "min_training_samples": 10,
    "training_epochs": 100,
    "learning_rate": 0.01,
    "logistic_min_accuracy": 0.6,
}

MODEL_FILE_NAME = "auto_fish_model.json"
TRAINING_DATA_FILE_NAME = "auto_fish_training_data.csv"


def get_default_settings():
    """Get the full default settings document (fresh copy)"""
    return {
        "general_settings": dict(DEFAULT_GENERAL_SETTINGS),
        "log_settings": dict(DEFAULT_LOG_SETTINGS),
        "training_settings": dict(DEFAULT_TRAINING_SETTINGS),
        "advanced_settings": dict(DEFAULT_ADVANCED_SETTINGS),
    }


def get_default_cycle_settings():
    """Get the flattened settings dict consumed by FishingCycle"""
    flat = {}
    for group in get_default_settings().values():
        flat.update(group)
    return flat

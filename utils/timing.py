# Copyright (C) 2026 BPS
# This file is part of Minigame AutoFish.
#
# Timing utilities: wall clock in milliseconds and humanized delays

import time


def now_ms():
    """Current wall-clock time in integer milliseconds"""
    return int(time.time() * 1000)


def random_delay_ms(rng, min_ms, max_ms):
    """Draw a delay uniformly from the inclusive range [min_ms, max_ms]

    Reversed bounds are swapped first, so a misconfigured (max < min) pair
    still yields a value inside the intended range.

    Args:
        rng: random.Random instance
        min_ms: Lower bound in milliseconds
        max_ms: Upper bound in milliseconds

    Returns:
        Delay in milliseconds
    """
    lo, hi = int(min_ms), int(max_ms)
    if hi < lo:
        lo, hi = hi, lo
    if hi == lo:
        return lo
    return rng.randint(lo, hi)


def humanized_delay_ms(rng, enabled, min_ms, max_ms):
    """Random delay when humanizing is enabled, else 0"""
    if not enabled:
        return 0
    return random_delay_ms(rng, min_ms, max_ms)


def jitter_ms(rng, max_jitter):
    """Small random jitter in [0, max_jitter) milliseconds"""
    return rng.randrange(max(1, int(max_jitter)))

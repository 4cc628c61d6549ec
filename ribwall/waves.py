"""Periodic depth functions for wave-driven ribs."""

import math

from config import WaveType


def wave_function(t: float, frequency: float, wave_type: int, phase_shift: float) -> float:
    """
    Evaluate the selected wave at normalized run position t.

    Args:
        t: Position along the run (0 = floor, 1 = top of run)
        frequency: Cycles over the run
        wave_type: 0 sine, 1 smooth (sin*|sin|), 2 sharp (triangle)
        phase_shift: Phase offset in radians

    Returns:
        Wave value in [-1, 1]. Unknown wave types evaluate as sine.
    """
    angle = t * frequency * math.pi * 2 + phase_shift
    s = math.sin(angle)

    if wave_type == WaveType.SMOOTH.value:
        return s * abs(s)
    if wave_type == WaveType.SHARP.value:
        return math.asin(s) / (math.pi / 2)
    return s

# Rib Wall PDE Configuration Module
from .ribwall_config import (
    RibWallConfig, config, RibParams, PricingRates, ExportParams,
    InstallationMode, WaveType, WAVE_TYPE_LABELS, apply_param_update, round_half_up
)

__all__ = [
    "RibWallConfig", "config", "RibParams", "PricingRates", "ExportParams",
    "InstallationMode", "WaveType", "WAVE_TYPE_LABELS", "apply_param_update",
    "round_half_up",
]

# Rib Wall PDE Engine Module
from .engine import RibEngine
from .sampler import BrightnessSampler, ImageSource, ImageDecodeError
from .waves import wave_function
from .control_points import generate_control_points, generate_control_points_lpath
from .spline import evaluate_spline_curve
from .profiles import RibProfile, ProfileSet, generate_rib_profiles, rib_lateral_offset
from .pricing import PricingResult, calculate_pricing
from .exporters import export_dxf, export_csv, write_export

__all__ = [
    "RibEngine",
    "BrightnessSampler",
    "ImageSource",
    "ImageDecodeError",
    "wave_function",
    "generate_control_points",
    "generate_control_points_lpath",
    "evaluate_spline_curve",
    "RibProfile",
    "ProfileSet",
    "generate_rib_profiles",
    "rib_lateral_offset",
    "PricingResult",
    "calculate_pricing",
    "export_dxf",
    "export_csv",
    "write_export",
]

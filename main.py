#!/usr/bin/env python3
"""
Rib Wall PDE: Main Entry Point
==============================

Usage:
    python main.py --summary                   Show configuration and pricing
    python main.py --all                       Generate DXF, CSV, STEP, STL, sheets
    python main.py --dxf --csv --mode both     Corner install cut file + report
    python main.py --dxf --image pattern.png   Image-driven rib depths

"""

import argparse
import json
import logging
import sys
from pathlib import Path

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from config import InstallationMode, apply_param_update, config  # noqa: E402
from ribwall.engine import RibEngine  # noqa: E402
from ribwall.exporters import write_export  # noqa: E402
from ribwall.metadata import write_artifact_metadata  # noqa: E402
from ribwall.sampler import ImageDecodeError  # noqa: E402


def validate_config() -> bool:
    """Report parameter values the engine will clamp or reorder."""
    print("Validating configuration...")
    errors = config.validate()

    if errors:
        print("\nCONFIGURATION WARNINGS:")
        for err in errors:
            print(f"  [!] {err}")
        return False

    print("  Configuration valid.")
    return True


def show_pricing(engine: RibEngine) -> None:
    pricing = engine.pricing(config.ribs, config.installation_mode, config.led_enabled)

    print("\n--- Estimate ---")
    print(f"  Coverage:      {pricing.wall_coverage}")
    print(f"  Surface Area:  {pricing.total_surface_area_sqft:.1f} sf")
    print(f"  Ribs:          ${pricing.rib_price:,.2f}")
    if config.led_enabled:
        print(f"  LED:           {pricing.led_linear_feet:.1f} lf = ${pricing.led_price:,.2f}")
    print(f"  Total:         ${pricing.total_price:,.2f}")

    splice = f" (spliced, {pricing.sections_per_rib} sections/rib)" if pricing.sections_per_rib > 1 else ""
    print(f"  Sheets:        {pricing.sheets_needed} @ {pricing.ribs_per_sheet} ribs/sheet{splice}")
    print(f"  Sheet Cost:    ${pricing.sheet_total_cost:,.2f}")


def export_cut_file(engine: RibEngine, out_root: Path, image_scale: float) -> Path:
    """Write the DXF cut file."""
    print("\n--- Exporting DXF Cut File ---")
    profiles = engine.generate(config.ribs, config.installation_mode, image_scale)
    dxf = engine.dxf(config.ribs, profiles=profiles)
    path = write_export(dxf, out_root / "DXF" / f"{config.export.file_stem}.dxf")
    write_artifact_metadata(path, config.ribs, config.installation_mode, "DXF")
    print(f"  {len(profiles)} rib outlines written to {path}")
    return path


def export_report(engine: RibEngine, out_root: Path) -> Path:
    """Write the CSV dimension/pricing report."""
    print("\n--- Exporting CSV Report ---")
    csv = engine.csv(config.ribs, config.installation_mode, config.led_enabled)
    path = write_export(csv, out_root / "CSV" / f"{config.export.file_stem}.csv")
    write_artifact_metadata(path, config.ribs, config.installation_mode, "CSV")
    print(f"  Report written to {path}")
    return path


def export_solids(engine: RibEngine, out_root: Path, image_scale: float, step: bool, stl: bool) -> None:
    """Write STEP/STL solids of the rib array."""
    from ribwall.extrusion import RibArrayModel

    print("\n--- Building Rib Solids ---")
    profiles = engine.generate(config.ribs, config.installation_mode, image_scale)
    model = RibArrayModel(profiles, config.ribs, config.installation_mode)

    try:
        model.generate_geometry()
        if step:
            path = model.export_step(out_root / "STEP")
            write_artifact_metadata(path, config.ribs, config.installation_mode, "STEP")
            print(f"  STEP written to {path}")
        if stl:
            path = model.export_stl(out_root / "STL")
            write_artifact_metadata(path, config.ribs, config.installation_mode, "STL")
            print(f"  STL written to {path}")
    except Exception as e:
        print(f"  Error building rib solids: {e}")


def layout_sheets(out_root: Path) -> None:
    """Lay rib blanks out on stock sheets."""
    from ribwall.nesting import SheetLayoutPlanner

    print("\n--- Laying Out Sheets ---")
    planner = SheetLayoutPlanner()
    slots = planner.plan(config.ribs, config.installation_mode)
    manifest = planner.export(slots, out_root / "sheets")
    sheets = len({slot.sheet_index for slot in slots})
    print(f"  {len(slots)} blanks on {sheets} sheets")
    print(f"  Manifest written to: {manifest}")


def apply_cli_params(args) -> bool:
    """Fold CLI options into the config singleton."""
    if args.params:
        try:
            update = json.loads(Path(args.params).read_text())
        except (OSError, ValueError) as e:
            print(f"  Could not read parameter file {args.params}: {e}")
            return False
        if "installationMode" in update:
            config.installation_mode = InstallationMode.parse(update["installationMode"])
        if "ledEnabled" in update:
            config.led_enabled = bool(update["ledEnabled"])
        if "imageScale" in update:
            config.image_scale = float(update["imageScale"])
        config.ribs = apply_param_update(config.ribs, update)

    if args.mode:
        config.installation_mode = InstallationMode.parse(args.mode)
    if args.led:
        config.led_enabled = True
    if args.image_scale is not None:
        config.image_scale = args.image_scale
    return True


def main():
    parser = argparse.ArgumentParser(description="Rib Wall PDE Environment")
    parser.add_argument("--all", action="store_true", help="Generate every artifact")
    parser.add_argument("--dxf", action="store_true", help="Export DXF cut file")
    parser.add_argument("--csv", action="store_true", help="Export CSV dimension/pricing report")
    parser.add_argument("--step", action="store_true", help="Export STEP solids")
    parser.add_argument("--stl", action="store_true", help="Export STL mesh")
    parser.add_argument("--sheets", action="store_true", help="Lay out rib blanks on stock sheets")
    parser.add_argument("--summary", action="store_true", help="Show configuration and pricing")
    parser.add_argument("--validate", action="store_true", help="Validate configuration only")
    parser.add_argument(
        "--mode", choices=[m.value for m in InstallationMode], help="Installation mode"
    )
    parser.add_argument("--led", action="store_true", help="Include LED lighting")
    parser.add_argument("--image", type=Path, help="Pattern image driving rib depth")
    parser.add_argument("--image-scale", type=float, help="Pattern tile size")
    parser.add_argument("--params", type=Path, help="JSON parameter update file")
    parser.add_argument(
        "--output", type=Path, default=project_root / "output", help="Output directory"
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()

    if len(sys.argv) == 1:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    print(f"{config.project_name} v{config.version}")

    if not apply_cli_params(args):
        return 1

    if args.validate:
        return 0 if validate_config() else 1

    engine = RibEngine()
    if args.image:
        try:
            engine.load_image(args.image)
        except ImageDecodeError as e:
            print(f"  [!] {e}")
            print("  Continuing with wave-driven ribs.")

    if args.summary:
        print(config.summary())
        show_pricing(engine)
        return 0

    # Warnings only: the engine clamps out-of-range values
    validate_config()

    image_scale = config.image_scale
    out_root = args.output

    if args.dxf or args.all:
        export_cut_file(engine, out_root, image_scale)

    if args.csv or args.all:
        export_report(engine, out_root)

    if args.step or args.stl or args.all:
        export_solids(engine, out_root, image_scale, args.step or args.all, args.stl or args.all)

    if args.sheets or args.all:
        layout_sheets(out_root)

    show_pricing(engine)
    print("\nDone.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

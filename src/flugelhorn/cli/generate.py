"""
Command-line interface for flugelhorn tube geometry generation.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from ..io.loaders import load_design_json, save_design_json
from ..calculator.validation import validate_design
from ..calculator.output import to_summary


def _configure_logging(verbosity: int) -> None:
    if verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Generate printable STEP/STL/3MF tube parts for a flugelhorn design",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate every part as STEP files in the current directory
  flugelhorn-geometry flugelhorn.json

  # Only the bell, with STL meshes, into a build directory
  flugelhorn-geometry flugelhorn.json --part bell --stl -o build

  # Check the design without building anything
  flugelhorn-geometry flugelhorn.json --validate-only

  # Quick low-resolution preview in the OCP viewer
  flugelhorn-geometry flugelhorn.json --slices 20 --view --no-save

  # Measure the printed wall thickness of every part
  flugelhorn-geometry flugelhorn.json --check-walls

  # Everything zipped, with 3MF meshes and an assembly
  flugelhorn-geometry flugelhorn.json --3mf --zip
        """
    )

    parser.add_argument(
        'design_file',
        type=str,
        help='Instrument design JSON file'
    )

    parser.add_argument(
        '-o', '--output-dir',
        type=str,
        default='.',
        help='Output directory for generated files (default: current directory)'
    )

    parser.add_argument(
        '--part',
        action='append',
        default=None,
        metavar='NAME',
        help='Generate only this part (repeatable, default: every part)'
    )

    parser.add_argument(
        '--slices',
        type=int,
        default=None,
        help='Override loft slices for every swept part (default: from the design)'
    )

    parser.add_argument(
        '--stl',
        action='store_true',
        help='Also export STL meshes'
    )

    parser.add_argument(
        '--3mf',
        dest='mesh_3mf',
        action='store_true',
        help='Also export 3MF meshes, plus an assembly of all placed parts'
    )

    parser.add_argument(
        '--zip',
        action='store_true',
        help='Write a single ZIP package instead of loose files'
    )

    parser.add_argument(
        '--no-save',
        action='store_true',
        help='Do not save output files (use with --view)'
    )

    parser.add_argument(
        '--view',
        action='store_true',
        help='View in OCP viewer (requires ocp_vscode extension)'
    )

    parser.add_argument(
        '--check-walls',
        action='store_true',
        help='Measure the built wall thickness of every part by ray casting'
    )

    parser.add_argument(
        '--validate-only',
        action='store_true',
        help='Validate the design and exit without building geometry'
    )

    parser.add_argument(
        '--save-json',
        type=str,
        default=None,
        help='Save the design as used (including slice overrides) to JSON'
    )

    parser.add_argument(
        '--force',
        action='store_true',
        help='Build even if validation reports errors'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Log progress (-v) or full debug output (-vv)'
    )

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    # Load design
    try:
        print(f"Loading design from {args.design_file}...")
        design = load_design_json(args.design_file)
    except Exception as e:
        print(f"Error loading design: {e}", file=sys.stderr)
        return 1

    if args.slices is not None:
        if args.slices < 1:
            print(f"Error: --slices must be at least 1, got {args.slices}", file=sys.stderr)
            return 1
        design.override_slices(args.slices)

    validation = validate_design(design)
    print(to_summary(design, validation))

    if args.validate_only:
        return 0 if validation.valid else 1

    if not validation.valid and not args.force:
        print("\nDesign has errors - fix them or use --force to build anyway", file=sys.stderr)
        return 1

    # Determine what to generate
    available = design.part_names()
    names = args.part or available
    unknown = [n for n in names if n not in available]
    if unknown:
        print(
            f"Error: unknown part(s) {', '.join(unknown)}; design has {', '.join(available)}",
            file=sys.stderr,
        )
        return 1

    # Geometry imports are slow (build123d); only pay for them when building
    from ..core.instrument import geometry_for_part
    from ..core.wall_thickness import measure_geometry_walls, wall_thickness_to_dict

    parts = {}
    wall_results = {}
    for name in names:
        print(f"\nGenerating {name}...")
        try:
            geometry = geometry_for_part(design, name, slices=args.slices)
            part = geometry.build()
        except ValueError as e:
            print(f"Error building {name}: {e}", file=sys.stderr)
            return 1
        parts[name] = part
        print(f"  Volume: {part.volume:.2f} mm³")

        if args.check_walls:
            result = measure_geometry_walls(geometry)
            if result is not None:
                wall_results[name] = result
                print(f"  {result.message}")

    output_dir = Path(args.output_dir)

    if not args.no_save:
        from ..io.package import (
            generate_package,
            save_package_to_dir,
            create_package_zip,
            package_basename,
        )

        print("\nExporting...")
        files = generate_package(
            design,
            parts,
            include_stl=args.stl,
            include_3mf=args.mesh_3mf,
            validation=validation,
            log=lambda msg: print(f"  {msg}"),
        )

        if args.zip:
            output_dir.mkdir(parents=True, exist_ok=True)
            zip_path = output_dir / f"{package_basename(design)}.zip"
            zip_path.write_bytes(create_package_zip(files))
            print(f"  Saved: {zip_path}")
        else:
            for path in save_package_to_dir(files, output_dir):
                print(f"  Saved: {path}")

        if wall_results:
            analysis_file = output_dir / "wall_thickness.json"
            analysis_data = {
                "design": design.name,
                "parts": {name: wall_thickness_to_dict(r) for name, r in wall_results.items()},
            }
            with open(analysis_file, 'w') as f:
                json.dump(analysis_data, f, indent=2)
            print(f"  Saved: {analysis_file}")

    # View in OCP viewer
    if args.view:
        try:
            from ocp_vscode import show
            show(*parts.values(), names=list(parts.keys()))
            print("Displayed in OCP viewer")
        except ImportError:
            print("\nWarning: ocp_vscode not available for viewing", file=sys.stderr)
            print("Install with: pip install ocp_vscode", file=sys.stderr)

    thin = [name for name, r in wall_results.items() if r.has_warning]
    if thin:
        print(f"\nWARNING: thin walls on {', '.join(thin)} - see wall_thickness.json")

    if args.save_json:
        output_path = Path(args.save_json)
        save_design_json(design, output_path)
        print(f"\nSaved design JSON: {output_path}")
        print("  This JSON reproduces the parts generated in this run")

    return 0


if __name__ == '__main__':
    sys.exit(main())

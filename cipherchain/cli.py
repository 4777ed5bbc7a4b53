"""
Command line front end: build a pipeline from -m specs or a saved
document, run it over text, a file or stdin, and print the result.
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .errors import CipherChainError
from .framework import MODULE_REGISTRY, TransformModule
from .log import log_info, set_verbose
from .pipeline import Pipeline
from .registry import create

# Record fields accepted in a -m spec next to the module's own parameters
RESERVED_KEYS = ("direction", "enabled")


def parse_module_spec(spec: str) -> TransformModule:
    """
    'caesar:shift=3' -> configured module.

    Options are comma separated key=value pairs. 'direction' and 'enabled'
    set the module's state instead of a parameter.
    """
    kind, _, options = spec.partition(":")
    module = create(kind.strip())
    record = {"config": {}}
    for option in filter(None, (o.strip() for o in options.split(","))):
        key, sep, value = option.partition("=")
        if not sep:
            raise argparse.ArgumentTypeError(f"Option '{option}' in '{spec}' is not key=value")
        key = key.strip()
        if key in RESERVED_KEYS:
            record[key] = value.strip()
        else:
            record["config"][key] = value
    if "enabled" in record:
        record["enabled"] = record["enabled"].lower() not in ("false", "no", "off", "0")
    return module.apply_record(record)


def list_modules():
    """Print all available modules and their parameters."""
    print("\nAvailable Modules:")
    print("=" * 60)
    for kind, cls in MODULE_REGISTRY.items():
        mode = "enc/dec" if cls.HAS_DIRECTION else "   ---"
        print(f"  {kind:<15} [{mode}]  {cls.description}")
        for p in cls.PARAMS:
            print(f"      {p.name}={p.default!r}  ({p.type_name}){'  ' + p.help if p.help else ''}")
    print("=" * 60)
    print(f"\nTotal: {len(MODULE_REGISTRY)} module(s) registered.")


def print_stages(pipeline: Pipeline):
    for stage in pipeline.stage_results():
        if stage.skipped:
            status = "skipped"
        elif stage.ok:
            status = repr(stage.output)
        else:
            status = f"ERROR {stage.error}"
        print(f"  [{stage.position}] {stage.module:<28} {status}", file=sys.stderr)


def read_input(args) -> str:
    if args.text is not None:
        return args.text
    if args.input:
        try:
            with open(args.input, "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            sys.exit(f"Error: File '{args.input}' not found.")
    if sys.stdin.isatty():
        print("[CIPHERCHAIN] Paste input below. Ctrl+D (Unix) or Ctrl+Z (Win) to end:", file=sys.stderr)
    try:
        return sys.stdin.read()
    except KeyboardInterrupt:
        sys.exit(0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cipherchain",
        description="cipherchain: run text through a pipeline of encoders, ciphers and transforms",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    source = parser.add_mutually_exclusive_group()
    source.add_argument("-m", "--module", action="append", default=[], metavar="KIND[:k=v,...]",
                        help="Append a module to the pipeline (repeatable), e.g. -m caesar:shift=3")
    source.add_argument("-p", "--pipeline", metavar="FILE", help="Load the pipeline from a JSON document")

    parser.add_argument("-d", "--decode", action="store_true",
                        help="Run the inverted pipeline (reverse order, every direction flipped)")
    parser.add_argument("-l", "--list", action="store_true", help="List all available modules")
    parser.add_argument("--stages", action="store_true", help="Print every stage result to stderr")
    parser.add_argument("--save", metavar="FILE", help="Write the pipeline document to FILE")

    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable verbose output (info and warning messages)")

    io_group = parser.add_mutually_exclusive_group()
    io_group.add_argument("-t", "--text", help="Direct text input")
    io_group.add_argument("-i", "--input", help="Input file path")
    parser.add_argument("-o", "--output", help="Output file path")
    return parser


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    set_verbose(args.verbose)

    if args.list:
        list_modules()
        return

    # 1. BUILD PIPELINE
    try:
        if args.pipeline:
            pipeline = Pipeline.load(args.pipeline)
        else:
            pipeline = Pipeline(modules=[parse_module_spec(spec) for spec in args.module])
    except (CipherChainError, argparse.ArgumentTypeError) as e:
        sys.exit(f"Pipeline Error: {e}")
    except OSError as e:
        sys.exit(f"Error reading pipeline: {e}")
    log_info(f"Pipeline: {', '.join(m.kind for m in pipeline.modules) or '(empty)'}")

    if args.save:
        try:
            pipeline.save(args.save)
        except OSError as e:
            sys.exit(f"Error writing pipeline: {e}")

    if args.decode:
        pipeline = pipeline.inverted()
        log_info("Decode mode: running the inverted pipeline")

    # 2. RUN
    pipeline.set_input(read_input(args))
    if args.stages:
        print_stages(pipeline)

    result = pipeline.final_output()
    if not result.ok:
        sys.exit(f"Error at stage {result.failed_position}: {result.error}")

    # 3. WRITE OUTPUT
    if args.output:
        try:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(result.text)
        except OSError as e:
            sys.exit(f"Error writing output: {e}")
    else:
        print(result.text)


if __name__ == "__main__":
    main()

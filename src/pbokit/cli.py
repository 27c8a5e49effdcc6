"""Command line interface for pbokit."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .logging import configure_logging
from .errors import CodecError
from .reporting import (
    set_reporter,
    get_reporter,
    PlainReporter,
    JsonLinesReporter,
    SilentReporter,
    RichReporter,
    set_verbosity,
)
from .api import (
    PackOptions,
    pack_directory,
    unpack_archive,
    cat_entry,
    inspect_archive,
    inspect_model,
    diff_archives,
)
from .archive.inspector import validate_archive


def _pack_cmd(args: argparse.Namespace) -> int:
    pack_directory(
        PackOptions(
            source=args.source,
            output_path=args.output,
            manifest_path=args.emit_manifest,
        )
    )
    return 0


def _unpack_cmd(args: argparse.Namespace) -> int:
    unpack_archive(args.archive, args.output, verify_digest=args.verify)
    return 0


def _print_inspection(info: dict) -> None:
    if info["metadata"]:
        print("Header extensions:")
        for key, value in info["metadata"].items():
            print(f"- {key}={value}")
        print("")
    print(f"# Files: {len(info['entries'])}\n")
    print(f"{'Path':50} {'Method':>9} {'Original':>9} {'Packed':>9}")
    print("=" * 80)
    for e in info["entries"]:
        print(
            f"{e['name']:50} {e['packing_method']:9} "
            f"{e['original_size']:9} {e['data_size']:9}"
        )


def _inspect_cmd(args: argparse.Namespace) -> int:
    info = inspect_archive(args.archive)
    issues = validate_archive(info)
    rep = get_reporter()
    rep.flush()
    if args.json:
        print(json.dumps({**info, "issues": issues}, indent=2, sort_keys=True))
    else:
        _print_inspection(info)
    for issue in issues:
        rep.warning(issue)
    rep.status(
        "Inspect summary: "
        + f"file={args.archive.name} entries={len(info['entries'])} "
        + f"digest_match={info['trailer']['digest_match']} issues={len(issues)}"
    )
    return 1 if issues else 0


def _cat_cmd(args: argparse.Namespace) -> int:
    try:
        data = cat_entry(args.archive, args.name)
    except KeyError:
        get_reporter().error(f"Entry not found: {args.name}")
        return 1
    sys.stdout.buffer.write(data)
    sys.stdout.flush()
    return 0


def _model_cmd(args: argparse.Namespace) -> int:
    info = inspect_model(args.model, geometry=not args.deps_only)
    if args.json:
        print(json.dumps(info, indent=2, sort_keys=True))
    else:
        print(f"Version: {info['version']}  LODs: {info['lod_count']}")
        for lod in info["lods"]:
            print(
                f"- resolution={lod['resolution']:g} faces={lod['faces']} "
                f"points={lod['points']} tags={','.join(lod['tags'])}"
            )
            for texture in lod["textures"]:
                print(f"    texture {texture}")
            for material in lod["materials"]:
                print(f"    material {material}")
    return 0


def _diff_cmd(args: argparse.Namespace) -> int:
    result = diff_archives(args.left, args.right)
    rep = get_reporter()
    rep.section("Diff results")
    diff_count = result["summary"]["count"]
    rep.status(
        "Diff summary: count="
        + f"{diff_count} left={args.left.name} right={args.right.name}",
    )
    print(json.dumps(result, indent=2, sort_keys=True))
    return 1 if diff_count else 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pbokit", description="PBO archive and MLOD model tool"
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (repeatable)",
    )
    p.add_argument(
        "-r",
        "--reporter",
        choices=["plain", "rich", "json", "silent"],
        default="plain",
        help="Select reporter backend: plain (default), rich, json (JSONL events), silent",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    pk = sub.add_parser("pack", help="Pack a directory into an archive")
    pk.add_argument("source", type=Path)
    pk.add_argument("output", type=Path)
    pk.add_argument(
        "--emit-manifest",
        dest="emit_manifest",
        type=Path,
        help="Optional path to write manifest JSON (opt-in)",
    )
    pk.set_defaults(func=_pack_cmd)

    up = sub.add_parser("unpack", help="Unpack an archive into a directory")
    up.add_argument("archive", type=Path)
    up.add_argument("output", type=Path)
    up.add_argument(
        "--verify",
        action="store_true",
        help="Verify the trailing digest before extracting",
    )
    up.set_defaults(func=_unpack_cmd)

    i = sub.add_parser("inspect", help="List archive metadata and entries")
    i.add_argument("archive", type=Path)
    i.add_argument("--json", action="store_true", help="Emit JSON")
    i.set_defaults(func=_inspect_cmd)

    c = sub.add_parser("cat", help="Write one entry's payload to stdout")
    c.add_argument("archive", type=Path)
    c.add_argument("name")
    c.set_defaults(func=_cat_cmd)

    m = sub.add_parser("model", help="Summarise a model file")
    m.add_argument("model", type=Path)
    m.add_argument(
        "--deps-only",
        action="store_true",
        help="Skip point/normal arrays (dependency listing only)",
    )
    m.add_argument("--json", action="store_true", help="Emit JSON")
    m.set_defaults(func=_model_cmd)

    d = sub.add_parser("diff", help="Diff two archives")
    d.add_argument("left", type=Path)
    d.add_argument("right", type=Path)
    d.set_defaults(func=_diff_cmd)

    return p


def _select_reporter(requested: str) -> None:
    if requested == "json":
        set_reporter(JsonLinesReporter())
    elif requested == "silent":
        set_reporter(SilentReporter())
    elif requested == "rich" and sys.stderr.isatty():
        set_reporter(RichReporter())
    else:
        # rich without a TTY falls back to plain
        set_reporter(PlainReporter())


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    _select_reporter(args.reporter)
    set_verbosity(args.verbose)
    configure_logging(args.verbose)
    try:
        return args.func(args)
    except CodecError as exc:
        rep = get_reporter()
        rep.flush()
        rep.error(str(exc), code=exc.code, context=exc.context or {})
        return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

from __future__ import annotations
import argparse, sys
from pathlib import Path

from demo_derive.compiler.config import ConfigError, GeneratorConfig, load_config
from demo_derive.compiler.pipeline import process_source
from demo_derive.internals import errors as er
from demo_derive.internals.version import get_versions, print_banner


def _resolve_config(args: argparse.Namespace, src_path: Path) -> GeneratorConfig:
    """File values first (--config, else demo.toml beside the source), then flags."""
    if args.config:
        config = load_config(Path(args.config))
    else:
        config = load_config(directory=src_path.parent)
    if args.no_std:
        config.std = False
    if args.visibility is not None:
        config.visibility = args.visibility
        config.validate()
    return config


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        prog="demo-derive",
        description="Generate demo constructors for Rust types that #[derive(Demo)]",
    )

    ap.add_argument("source", nargs="?", help="Path to source file (.rs)")
    ap.add_argument("-o", "--out", metavar="OUT",
                    help="Write generated code to OUT (default: stdout)")
    ap.add_argument("--no-std", action="store_true",
                    help="Target the reduced vocabulary (no heap containers)")
    ap.add_argument("--config", metavar="PATH",
                    help="Configuration file (default: demo.toml next to the source)")
    ap.add_argument("--visibility", metavar="VIS",
                    help="Default constructor visibility, e.g. 'pub(crate)' or ''")
    ap.add_argument("--dump-parse", action="store_true", help="Print raw Lark tree")
    ap.add_argument("--dump-ast", action="store_true", help="Print declarations")
    ap.add_argument("--explain", metavar="CODE", help="Describe a diagnostic code and exit")
    ap.add_argument("--version", action="store_true", help="Print version and exit")

    args = ap.parse_args(argv)

    if args.version:
        print(get_versions()["app"])
        return 0

    if args.explain:
        try:
            print(er.explain(args.explain))
        except KeyError:
            print(f"error: unknown diagnostic code '{args.explain}'", file=sys.stderr)
            return 2
        return 0

    print_banner()

    if not args.source:
        print("error: source file required", file=sys.stderr)
        return 2

    src_path = Path(args.source).resolve()
    try:
        src = src_path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"error: cannot read {src_path}: {e}", file=sys.stderr)
        return 2

    try:
        config = _resolve_config(args, src_path)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    result = process_source(src, filename=str(src_path), config=config,
                            dump_parse=args.dump_parse, dump_ast=args.dump_ast)
    result.reporter.print()

    if result.output:
        if args.out:
            try:
                Path(args.out).write_text(result.output, encoding="utf-8")
            except OSError as e:
                print(f"error: cannot write {args.out}: {e}", file=sys.stderr)
                return 2
        else:
            sys.stdout.write(result.output)

    return result.exit_code


if __name__ == "__main__":
    raise SystemExit(main())

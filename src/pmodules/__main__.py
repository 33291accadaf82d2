"""CLI entry point: run `pmodules src/App.py` or `python -m pmodules src/App.py`."""

import logging
import sys
from pathlib import Path


def main(argv=None) -> int:
    import argparse
    from .compiler.driver import LoadSession

    parser = argparse.ArgumentParser(prog="pmodules", description="Load a package laid out by pmodules conventions.")
    parser.add_argument("file", type=Path, help="Path to the package root file (src/<Root>.py)")
    parser.add_argument("--tree", action="store_true", help="Print the loaded namespace tree")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every resolution step")
    parser.add_argument("--no-color", action="store_true", help="Plain diagnostics")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    path = args.file.resolve()
    if not path.exists():
        sys.stderr.write(f"pmodules: error: file not found: {path}\n")
        return 1
    if not path.is_file():
        sys.stderr.write(f"pmodules: error: not a file: {path}\n")
        return 1

    try:
        session = LoadSession(path)
    except ValueError as e:
        sys.stderr.write(f"pmodules: error: {e}\n")
        return 1

    try:
        result = session.run()
    except Exception as e:
        sys.stderr.write(f"pmodules: error while loading {path}: {e!r}\n")
        return 1
    if not result.success:
        sys.stderr.write(result.reporter.format_all_errors(color=False if args.no_color else None) + "\n")
        return 1

    if args.tree:
        root_dir = path.parent
        for record in session.tree():
            indent = "  " * (record.path.depth - 1)
            kind = record.kind.value if record.kind else "bound"
            where = ""
            if record.file is not None:
                try:
                    where = str(record.file.relative_to(root_dir))
                except ValueError:
                    where = str(record.file)
            print(f"{indent}{record.path.name} ({kind}) {where}".rstrip())
    return 0


if __name__ == "__main__":
    sys.exit(main())

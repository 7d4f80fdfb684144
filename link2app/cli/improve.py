# link2app/cli/improve.py
from __future__ import annotations
import argparse
import sys
from pathlib import Path

from link2app.ai.ai_generator import AIGenerator
from link2app.errors import Link2AppError
from link2app.models import Provider
from link2app.settings import load_settings

def main(argv=None) -> int:
    p = argparse.ArgumentParser(prog="link2app-improve",
                                description="Apply an AI suggestion to a generated ContentView.swift.")
    p.add_argument("file", nargs="?", help="Swift file to improve (e.g. exports/Demo/ContentView.swift)")
    p.add_argument("-s", "--suggestion", default=None, help="What to change, e.g. 'Add dark mode support'")
    p.add_argument("--list", action="store_true", help="Print the built-in suggestions and exit")
    p.add_argument("--provider", choices=[x.value for x in Provider], default=None)
    p.add_argument("--in-place", action="store_true", help="Overwrite the file instead of printing")
    p.add_argument("--settings-file", default=None)
    args = p.parse_args(argv)

    settings = load_settings(args.settings_file)
    ai = AIGenerator(settings)

    if args.list:
        for s in ai.suggestions():
            print(f"- {s}")
        return 0
    if not args.file or not args.suggestion:
        p.error("a file and --suggestion are required (or use --list)")

    path = Path(args.file)
    try:
        code = path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    try:
        improved = ai.improve_code(code, args.suggestion, args.provider)
    except ValueError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2
    except Link2AppError as e:
        print(f"❌ [{e.kind.value}] {e}", file=sys.stderr)
        return 1

    if args.in_place:
        path.write_text(improved + "\n", encoding="utf-8")
        print(f"✅ Updated {path}")
    else:
        print(improved)
    return 0

if __name__ == "__main__":
    sys.exit(main())

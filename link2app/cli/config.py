# link2app/cli/config.py
from __future__ import annotations
import argparse
import json
import sys

from pydantic import ValidationError

from link2app.settings import PERSISTED_KEYS, load_settings, reset_settings, settings_path, update_settings

def _parse_pair(text: str) -> tuple[str, str]:
    if "=" not in text:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {text!r}")
    key, value = text.split("=", 1)
    return key.strip().upper(), value

def main(argv=None) -> int:
    p = argparse.ArgumentParser(prog="link2app-config", description="Show or change stored settings.")
    sub = p.add_subparsers(dest="cmd", required=True)
    sub.add_parser("show", help="Effective settings (API keys masked)")
    sub.add_parser("path", help="Location of the settings file")
    st = sub.add_parser("set", help=f"Store KEY=VALUE pairs. Keys: {', '.join(PERSISTED_KEYS)}")
    st.add_argument("pairs", nargs="+", type=_parse_pair)
    sub.add_parser("reset", help="Delete the settings file; defaults and env apply again")
    p.add_argument("--settings-file", default=None)
    args = p.parse_args(argv)

    if args.cmd == "path":
        print(settings_path(args.settings_file))
        return 0

    if args.cmd == "show":
        print(json.dumps(load_settings(args.settings_file).masked(), indent=2, sort_keys=True))
        return 0

    if args.cmd == "reset":
        if reset_settings(args.settings_file):
            print(f"🗑 Removed {settings_path(args.settings_file)}")
        else:
            print(f"Nothing stored at {settings_path(args.settings_file)}")
        return 0

    try:
        update_settings(args.settings_file, **dict(args.pairs))
    except (KeyError, ValidationError) as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2
    print(f"✅ Saved {', '.join(sorted(k for k, _ in args.pairs))} to {settings_path(args.settings_file)}")
    return 0

if __name__ == "__main__":
    sys.exit(main())

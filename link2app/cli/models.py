# link2app/cli/models.py
from __future__ import annotations
import argparse
import sys

from link2app.ai import llm
from link2app.errors import Link2AppError
from link2app.models import Provider
from link2app.settings import load_settings

def main(argv=None) -> int:
    p = argparse.ArgumentParser(prog="link2app-models", description="List local Ollama models or test a provider.")
    p.add_argument("--check", choices=[x.value for x in Provider], default=None,
                   help="Test the connection to a provider instead of listing models")
    p.add_argument("--settings-file", default=None)
    args = p.parse_args(argv)

    settings = load_settings(args.settings_file)

    if args.check:
        status = llm.check_connection(args.check, settings)
        mark = "✅" if status.connected else "❌"
        print(f"{mark} {Provider(args.check).display_name}: {status.message}")
        return 0 if status.connected else 1

    try:
        models = llm.list_local_models(settings)
    except Link2AppError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    if not models:
        print(f"No models installed at {settings.OLLAMA_HOST}")
    for m in models:
        size = m.get("size")
        print(f"{m['name']}\t{size if size is not None else ''}".rstrip())
    return 0

if __name__ == "__main__":
    sys.exit(main())

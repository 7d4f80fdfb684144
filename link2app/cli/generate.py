# link2app/cli/generate.py
from __future__ import annotations
import argparse
import sys

from link2app.ai import llm
from link2app.errors import Link2AppError
from link2app.models import Provider
from link2app.settings import load_settings

def main(argv=None) -> int:
    p = argparse.ArgumentParser(prog="link2app-generate", description="Send one prompt to an LLM provider.")
    p.add_argument("prompt", help="Prompt text; '-' reads it from stdin")
    p.add_argument("--provider", choices=[x.value for x in Provider], default=None,
                   help="Provider (default: LLM_PROVIDER setting)")
    p.add_argument("--model", default=None, help="Model name (default: per-provider setting)")
    p.add_argument("--system", default=None, help="Optional system prompt")
    p.add_argument("--temperature", type=float, default=None)
    p.add_argument("--max-tokens", type=int, default=None)
    p.add_argument("--stream", action="store_true", help="Print text as it arrives (Ollama streams natively)")
    p.add_argument("--settings-file", default=None, help="Settings JSON (default: $LINK2APP_SETTINGS_FILE)")
    args = p.parse_args(argv)

    prompt = sys.stdin.read() if args.prompt == "-" else args.prompt
    settings = load_settings(args.settings_file)
    opts = dict(system=args.system, model=args.model, temperature=args.temperature, max_tokens=args.max_tokens)

    try:
        if args.stream:
            for update in llm.generate_stream(prompt, args.provider, settings, **opts):
                sys.stdout.write(update.delta)
                sys.stdout.flush()
            sys.stdout.write("\n")
        else:
            print(llm.generate(prompt, args.provider, settings, **opts))
    except ValueError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2
    except Link2AppError as e:
        print(f"❌ [{e.kind.value}] {e}", file=sys.stderr)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())

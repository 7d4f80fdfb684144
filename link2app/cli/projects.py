# link2app/cli/projects.py
from __future__ import annotations
import argparse
import sys

from link2app.settings import load_settings
from link2app.store import ProjectStore

def main(argv=None) -> int:
    p = argparse.ArgumentParser(prog="link2app-projects", description="Inspect saved conversion projects.")
    sub = p.add_subparsers(dest="cmd", required=True)
    ls = sub.add_parser("list", help="All projects, most recently modified first")
    ls.add_argument("--limit", type=int, default=None, help="Show at most N projects (default: all)")
    show = sub.add_parser("show", help="Print one project as JSON")
    show.add_argument("id")
    rm = sub.add_parser("delete", help="Remove a project record (exported files are kept)")
    rm.add_argument("id")
    p.add_argument("--settings-file", default=None)
    args = p.parse_args(argv)

    settings = load_settings(args.settings_file)
    store = ProjectStore(settings.LINK2APP_PROJECTS_FILE)

    if args.cmd == "list":
        projects = store.recent(limit=args.limit)
        if not projects:
            print("No projects yet.")
        for proj in projects:
            print(f"{proj.id}  {proj.status.value:<10}  {proj.provider.value:<13}  {proj.name}  {proj.website_url}")
        return 0

    if args.cmd == "show":
        proj = store.get(args.id)
        if proj is None:
            print(f"Project not found: {args.id}", file=sys.stderr)
            return 1
        print(proj.model_dump_json(indent=2))
        return 0

    if not store.delete(args.id):
        print(f"Project not found: {args.id}", file=sys.stderr)
        return 1
    print(f"🗑 Deleted {args.id}")
    return 0

if __name__ == "__main__":
    sys.exit(main())

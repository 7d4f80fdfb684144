# link2app/cli/convert.py
from __future__ import annotations
import argparse
import sys

from link2app.errors import Link2AppError
from link2app.models import DEFAULT_MINIMUM_IOS_VERSION, AppFeature, Provider, ProjectCustomizations, TargetDevice
from link2app.pipeline import convert_website
from link2app.settings import load_settings
from link2app.store import ProjectStore

def main(argv=None) -> int:
    p = argparse.ArgumentParser(prog="link2app-convert",
                                description="Website URL -> analyzed page -> SwiftUI code -> project folder")
    p.add_argument("url", help="Website to convert, e.g. https://example.com")
    p.add_argument("--name", default=None, help="Project name (default: host name)")
    p.add_argument("--provider", choices=[x.value for x in Provider], default=None)
    p.add_argument("--out", default=None, help="Export directory (default: LINK2APP_EXPORT_DIR)")
    p.add_argument("--no-export", action="store_true", help="Only print the generated code")
    p.add_argument("--app-name", default=None)
    p.add_argument("--bundle-id", default=None)
    p.add_argument("--ios", default=DEFAULT_MINIMUM_IOS_VERSION, help="Minimum iOS version")
    p.add_argument("--device", action="append", choices=[d.value for d in TargetDevice],
                   help="Target device (repeatable; default: iphone and ipad)")
    p.add_argument("--feature", action="append", choices=[f.value for f in AppFeature],
                   help="Feature to request (repeatable)")
    p.add_argument("--settings-file", default=None)
    args = p.parse_args(argv)

    settings = load_settings(args.settings_file)
    store = ProjectStore(settings.LINK2APP_PROJECTS_FILE)

    custom = ProjectCustomizations(app_name=args.app_name, bundle_identifier=args.bundle_id,
                                   minimum_ios_version=args.ios)
    if args.device:
        custom.target_devices = [TargetDevice(d) for d in args.device]
    if args.feature:
        custom.include_features = [AppFeature(f) for f in args.feature]

    name = args.name or args.url.split("://", 1)[-1].split("/", 1)[0] or "New Project"
    project = store.create(
        name=name,
        website_url=args.url,
        provider=Provider(args.provider or settings.LLM_PROVIDER),
        customizations=custom,
    )
    print(f"📝 Project {project.name} ({project.id})")

    destination = None if args.no_export else (args.out or settings.LINK2APP_EXPORT_DIR)
    try:
        result = convert_website(project.id, store, settings, destination,
                                 progress=lambda msg: print(f"… {msg}"))
    except (ValueError, Link2AppError) as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    if result.export_path is None:
        print(result.code)
    print(f"✅ {result.project.status.display_name}")
    return 0

if __name__ == "__main__":
    sys.exit(main())

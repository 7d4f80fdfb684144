# link2app/scaffolds/ios_project.py
from __future__ import annotations
from pathlib import Path
from typing import Dict, Optional

from link2app.errors import ExportError
from link2app.models import DEFAULT_MINIMUM_IOS_VERSION
from link2app.utils.templating import bundle_identifier as default_bundle_identifier
from link2app.utils.templating import render_template, swift_identifier

MAIN_SOURCE_FILE = "ContentView.swift"

APP_TEMPLATE = """import SwiftUI

@main
struct {{ identifier }}App: App {
    var body: some Scene {
        WindowGroup {
            ContentView()
        }
    }
}
"""

PACKAGE_TEMPLATE = """// swift-tools-version: 5.9
import PackageDescription

let package = Package(
    name: "{{ identifier }}",
    platforms: [
        .iOS(.v{{ ios_major }}),
        .macOS(.v14)
    ],
    products: [
        .executable(name: "{{ identifier }}", targets: ["{{ identifier }}"])
    ],
    targets: [
        .executableTarget(
            name: "{{ identifier }}",
            dependencies: [],
            path: "."
        )
    ]
)
"""

README_TEMPLATE = """# {{ name }}

Generated by Link2App - Convert any website into an iOS app

- Bundle identifier: `{{ bundle_id }}`
{% if source_url %}
- Source website: {{ source_url }}
{% endif %}

## Features

- Native iOS SwiftUI interface
- Responsive design for iPhone and iPad
- Generated from website content using AI

## Requirements

- iOS {{ minimum_ios_version }}+
- Xcode 15.0+

## Installation

1. Open the folder in Xcode (File > Open, pick `Package.swift`)
2. Select your target device or simulator
3. Run the project (Cmd+R)

The generated `ContentView.swift` is model output and has not been compiled;
review it before shipping.
"""

GITIGNORE_TEMPLATE = """# Xcode
*.xcodeproj/*
!*.xcodeproj/project.pbxproj
!*.xcodeproj/xcshareddata/
!*.xcodeproj/project.xcworkspace/
*.xcworkspace/*
!*.xcworkspace/contents.xcworkspacedata

# Build generated
build/
DerivedData/

# Various settings
*.pbxuser
!default.pbxuser
*.mode1v3
!default.mode1v3
*.mode2v3
!default.mode2v3
*.perspectivev3
!default.perspectivev3
xcuserdata/

# Swift Package Manager
.build/

# CocoaPods
Pods/

# macOS
.DS_Store
"""

# file name -> template; ContentView.swift is the generated text itself
TEMPLATE_FILES: Dict[str, str] = {
    "App.swift": APP_TEMPLATE,
    "Package.swift": PACKAGE_TEMPLATE,
    "README.md": README_TEMPLATE,
    ".gitignore": GITIGNORE_TEMPLATE,
}

EXPORTED_FILES = (MAIN_SOURCE_FILE, *TEMPLATE_FILES)


def _check_name(project_name: str) -> str:
    name = (project_name or "").strip()
    if not name or name in (".", ".."):
        raise ValueError("project name must not be empty")
    if "/" in name or "\\" in name:
        raise ValueError(f"project name must not contain path separators: {project_name!r}")
    return name


def export_project(
    project_name: str,
    generated_text: str,
    destination: str | Path,
    *,
    bundle_identifier: Optional[str] = None,
    minimum_ios_version: str = DEFAULT_MINIMUM_IOS_VERSION,
    source_url: Optional[str] = None,
) -> Path:
    """
    Write a minimal SwiftUI package for `project_name` under `destination`:
    ContentView.swift (the generated code), App.swift, Package.swift,
    README.md and .gitignore.

    Returns the project directory Path.
    """
    name = _check_name(project_name)
    minimum_ios_version = minimum_ios_version or DEFAULT_MINIMUM_IOS_VERSION
    ios_major = minimum_ios_version.split(".")[0]
    data = {
        "name": name,
        "identifier": swift_identifier(name),
        "bundle_id": bundle_identifier or default_bundle_identifier(name),
        "minimum_ios_version": minimum_ios_version,
        "ios_major": ios_major if ios_major.isdigit() else DEFAULT_MINIMUM_IOS_VERSION.split(".")[0],
        "source_url": source_url or "",
    }

    project_dir = Path(destination) / name
    try:
        project_dir.mkdir(parents=True, exist_ok=True)

        main_source = generated_text if generated_text.endswith("\n") else generated_text + "\n"
        (project_dir / MAIN_SOURCE_FILE).write_text(main_source, encoding="utf-8")

        for filename, template in TEMPLATE_FILES.items():
            (project_dir / filename).write_text(render_template(template, data), encoding="utf-8")
    except OSError as e:
        raise ExportError(f"Error exporting project to {project_dir}: {e}") from e

    return project_dir

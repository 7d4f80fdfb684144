# tests/test_prompt_engine.py
import pytest
from jinja2 import UndefinedError

from link2app.prompts.registry import PromptRegistry
from link2app.utils.templating import bundle_identifier, render_template, swift_identifier


def test_render_template_basic():
    out = render_template("Hello {{ name }}", {"name": "Link2App"})
    assert out == "Hello Link2App"


def test_render_template_is_strict():
    with pytest.raises(UndefinedError):
        render_template("Hello {{ missing }}", {})


@pytest.mark.parametrize("name, expected", [
    ("Demo", "Demo"),
    ("my cool app!", "MyCoolApp"),
    ("example.com", "ExampleCom"),
    ("2048 game", "App2048Game"),
    ("???", "App"),
])
def test_swift_identifier(name, expected):
    assert swift_identifier(name) == expected


def test_bundle_identifier():
    assert bundle_identifier("My Shop") == "com.myshop.app"


def test_registry_loads_system_messages(tmp_path):
    prompts_dir = tmp_path / "prompts"
    prompts_dir.mkdir()
    (prompts_dir / "system_messages.yaml").write_text("default: 'Hi'\nollama: 'Local'\n", encoding="utf-8")
    (prompts_dir / "prompt_db.jsonl").write_text("", encoding="utf-8")

    reg = PromptRegistry(base_dir=str(prompts_dir))
    assert reg.get_system_message("ollama") == "Local"
    assert reg.get_system_message("openai") == "Hi"


def test_registry_latest_version(tmp_path):
    (tmp_path / "prompt_db.jsonl").write_text(
        '{"id": "p", "version": "1.9.0", "purpose": "", "template": "old {{ x }}"}\n'
        '\n'
        '{"id": "p", "version": "1.10.0", "purpose": "", "template": "new {{ x }}"}\n',
        encoding="utf-8",
    )
    reg = PromptRegistry(base_dir=str(tmp_path))
    latest = reg.get_prompt("p")
    assert latest.version == "1.10.0"
    assert reg.render_prompt(latest, {"x": 1}) == "new 1"
    assert reg.get_prompt("p", "1.9.0").template == "old {{ x }}"
    with pytest.raises(KeyError):
        reg.get_prompt("missing")
    with pytest.raises(KeyError):
        reg.get_prompt("p", "2.0.0")


def test_packaged_prompts_are_present():
    reg = PromptRegistry()
    assert "SwiftUI" in reg.get_system_message("default")
    assert "iPad" in reg.get_system_message("ollama")
    assert reg.get_prompt("ios_app_generation").template
    assert reg.get_prompt("website_conversion").template

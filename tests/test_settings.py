from tsdoc import extract_module
from tsdoc.models import Variant
from tsdoc.settings import ExtractorSettings, load_settings


def test_defaults(monkeypatch):
    for key in ("TSDOC_VARIANT", "TSDOC_DEBUG", "TSDOC_SOURCES_ROOT"):
        monkeypatch.delenv(key, raising=False)
    settings = ExtractorSettings()

    assert settings.variant is Variant.PUBLIC
    assert settings.sources_root == "src"
    assert settings.initializer_preview_limit == 50
    assert settings.fallback_signature_limit == 100
    assert settings.interface_preview_members == 3
    assert settings.debug is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("TSDOC_DEBUG", "1")
    monkeypatch.setenv("TSDOC_SOURCES_ROOT", "lib")

    settings = load_settings()
    assert settings.debug is True
    assert settings.sources_root == "lib"


def test_custom_prefix(monkeypatch):
    monkeypatch.setenv("DOCS_VARIANT", "internal")
    assert load_settings(env_prefix="DOCS_").variant is Variant.INTERNAL


def test_settings_drive_extraction(tmp_path):
    path = tmp_path / "lib" / "core" / "io.ts"
    path.parent.mkdir(parents=True)
    path.write_text(
        "export const greeting = 'hello';\n"
        "export interface Wide { a: 1; b: 2; c: 3 }\n",
        encoding="utf-8",
    )
    settings = load_settings(
        sources_root="lib", initializer_preview_limit=5, interface_preview_members=1
    )
    result = extract_module(path, settings=settings)

    assert result.module == "core.io"
    symbols = {s.name: s for s in result.exports}
    assert symbols["greeting"].signature == 'const greeting: "hello"'
    assert symbols["Wide"].signature == "interface Wide { a: 1; ... }"

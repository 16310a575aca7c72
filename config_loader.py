# config_loader.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

try:
    import yaml  # PyYAML
except ImportError as e:
    raise SystemExit(
        "Missing dependency: PyYAML\n"
        "Install with: python -m pip install pyyaml"
    ) from e


class NfmConfig:
    """
    Immutable-ish container for the CLI and preview server settings.

    The parser itself takes no configuration.
    """

    def __init__(
        self,
        *,
        encoding: str,
        extensions: set[str],
        doc_dir: str,
        title: str,
        lang: str,
        stylesheet: Optional[str],
    ):
        self.encoding = encoding
        self.extensions = extensions
        self.doc_dir = doc_dir
        self.title = title
        self.lang = lang
        self.stylesheet = stylesheet


# ---------------- Defaults ---------------------------------------------------

DEFAULT_CONFIG = NfmConfig(
    encoding="utf-8",
    extensions={".md", ".nfm"},
    doc_dir="docs",
    title="NFM Export",
    lang="en",
    stylesheet=None,
)

# ---------------- Loader -----------------------------------------------------


def _as_suffix_set(value: Any, name: str) -> set[str]:
    if value is None:
        return set()
    if not isinstance(value, list):
        raise TypeError(f"{name} must be a list of strings")
    # accept "md" as well as ".md"
    return {"." + str(v).lower().lstrip(".") for v in value}


def _as_str(value: Any, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise TypeError(f"{name} must be a non-empty string")
    return value.strip()


def load_config(path: Path) -> NfmConfig:
    """
    Load YAML config and return an NfmConfig instance.
    """
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise TypeError("Config root must be a mapping")

    document = raw.get("document", {}) or {}
    if not isinstance(document, dict):
        raise TypeError("document must be a mapping")

    stylesheet = document.get("stylesheet", DEFAULT_CONFIG.stylesheet)
    if stylesheet is not None:
        stylesheet = _as_str(stylesheet, "document.stylesheet")

    return NfmConfig(
        encoding=_as_str(raw.get("encoding", DEFAULT_CONFIG.encoding), "encoding"),
        extensions=_as_suffix_set(
            raw.get("extensions", sorted(DEFAULT_CONFIG.extensions)),
            "extensions",
        ),
        doc_dir=_as_str(raw.get("doc_dir", DEFAULT_CONFIG.doc_dir), "doc_dir"),
        title=_as_str(document.get("title", DEFAULT_CONFIG.title), "document.title"),
        lang=_as_str(document.get("lang", DEFAULT_CONFIG.lang), "document.lang"),
        stylesheet=stylesheet,
    )


def load_config_if_present(path: Path) -> NfmConfig:
    """Like load_config(), but a missing file means the defaults."""
    if not path.exists():
        return DEFAULT_CONFIG
    return load_config(path)

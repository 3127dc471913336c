"""
Locale catalog for the semantic labels produced by the engine.

The engine only returns keys such as 'fit.perfect' or 'distribution.bell';
this catalog renders them for a locale. Each locale is a flat JSON object
stored as <locale>.json in the locales directory.
"""

import json
from pathlib import Path
from typing import Any

from catchery import log_warning

from rollforge.core.constants import DistributionLabel, FitLabel
from rollforge.core.logging import log_debug
from rollforge.core.utils import Singleton

LOCALES_DIR = Path(__file__).resolve().parent.parent / "data" / "locales"
DEFAULT_LOCALE = "en"


def _load_locale_file(filepath: Path) -> dict[str, str]:
    """Helper to load and validate one locale file."""
    with open(filepath, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Expected object in {filepath}, got {type(data).__name__}")
    return {str(key): str(value) for key, value in data.items()}


class LabelCatalog(metaclass=Singleton):
    """
    Registry of every locale table, keyed by locale tag.
    """

    translations: dict[str, dict[str, str]]
    default_locale: str

    def __init__(self, locales_dir: Path | None = None) -> None:
        """
        Initialize the LabelCatalog.

        Args:
            locales_dir (Path | None):
                The directory containing <locale>.json files, the packaged
                locales if None.

        """
        self.reload(locales_dir)

    def reload(self, locales_dir: Path | None = None, default_locale: str = DEFAULT_LOCALE) -> None:
        """
        (Re)load every locale file of a directory.

        Args:
            locales_dir (Path | None):
                The directory to load, the packaged locales if None.
            default_locale (str):
                The locale used when an unknown one is requested.

        """
        root = locales_dir or LOCALES_DIR
        self.translations = {}
        self.default_locale = default_locale
        for filepath in sorted(root.glob("*.json")):
            try:
                self.translations[filepath.stem] = _load_locale_file(filepath)
            except (OSError, json.JSONDecodeError, ValueError) as e:
                log_warning(
                    f"Skipping locale file '{filepath}': {e!s}",
                    {"path": str(filepath), "error": str(e)},
                )
        log_debug(
            f"Loaded {len(self.translations)} locales from {root}",
            {"locales": ",".join(self.translations)},
        )

    @property
    def locales(self) -> list[str]:
        return sorted(self.translations)

    def translate(self, key: str, locale: str | None = None, **options: Any) -> str:
        """
        Renders a label key in a locale.

        Placeholders written '{{name}}' are replaced by the matching option.

        Args:
            key (str): The label key, e.g. 'fit.perfect'.
            locale (str | None): The locale tag, the default locale if None.
            **options: Values substituted into the placeholders.

        Returns:
            str: The rendered text, or the key itself if it is not translated.

        """
        locale = locale or self.default_locale
        if locale not in self.translations:
            log_warning(
                f"Unknown locale '{locale}', using '{self.default_locale}'",
                {"locale": locale, "key": key},
            )
            locale = self.default_locale
        text = self.translations.get(locale, {}).get(key)
        if text is None:
            return key
        for name, value in options.items():
            text = text.replace(f"{{{{{name}}}}}", str(value))
        return text


def translate(key: str, locale: str | None = None, **options: Any) -> str:
    """Renders a label key with the shared catalog."""
    return LabelCatalog().translate(key, locale, **options)


def label_text(label: FitLabel | DistributionLabel, locale: str | None = None) -> str:
    return translate(label.translation_key, locale)

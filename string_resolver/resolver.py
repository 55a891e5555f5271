"""Core merge logic for localized string documents."""

import logging
import re
from typing import Any, Iterable, Iterator, Optional, Union

import nodesemver

from .errors import ConflictError, DuplicateError, MissingBaseValueError, ValidationError
from .models import (
    AccessorString,
    EntryDocument,
    EntryType,
    LanguageValue,
    LocalizedString,
    Platform,
    ResolvedKeyEntry,
    make_payload,
)

logger = logging.getLogger(__name__)

# %@ or %1$@ in an iOS format string
IOS_TEMPLATE_PATTERN = re.compile(r"%(\d+\$)?@")

SUPPORTED_PLATFORMS = (Platform.IOS, Platform.ANDROID)


def clean_version(version: Optional[str]) -> str:
    """
    Normalize a semantic version string.
    Raises ValidationError if it is missing or not a valid version.
    """
    if not isinstance(version, str) or not version.strip():
        raise ValidationError("Version must be a valid semver pattern")
    cleaned = nodesemver.clean(version.strip().lstrip("=v"), False)
    if not cleaned:
        raise ValidationError(f"Version must be a valid semver pattern, got {version!r}")
    return cleaned


def parse_platform(platform: Union[str, Platform]) -> Platform:
    """Convert a platform tag to a supported merger Platform."""
    try:
        parsed = Platform(platform.value if isinstance(platform, Platform) else platform)
    except ValueError:
        parsed = None
    if parsed not in SUPPORTED_PLATFORMS:
        raise ValidationError(f"Platform must be 'ios' or 'android', got {platform!r}")
    return parsed


def version_satisfies(version: str, version_range: str) -> bool:
    """Check a version against an npm-style range."""
    return nodesemver.satisfies(version, version_range, False)


class EntryMerger:
    """
    Accumulates entry documents into a resolved table for one platform and version.

    Documents are strictly additive. A key may receive at most one value per
    language; a second value is a conflict and aborts the merge.
    """

    IOS = Platform.IOS.value
    ANDROID = Platform.ANDROID.value

    def __init__(self, platform: Union[str, Platform], version: str, source_id: Optional[str] = None):
        self.platform = parse_platform(platform)
        self.version = clean_version(version)
        self.source_id = source_id
        # keyed by the unprefixed key, in first-encounter order
        self._entries: dict[str, ResolvedKeyEntry] = {}
        self._resolved_keys: dict[str, ResolvedKeyEntry] = {}

    def __repr__(self) -> str:
        return (
            f"EntryMerger(platform={self.platform.value!r}, version={self.version!r}, "
            f"keys={len(self._entries)})"
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ResolvedKeyEntry]:
        return iter(self._entries.values())

    def __contains__(self, key: str) -> bool:
        return self._lookup(key) is not None

    @property
    def entries(self) -> list[ResolvedKeyEntry]:
        """Resolved entries in the order their keys were first encountered."""
        return list(self._entries.values())

    def add_entries(self, documents: Iterable[Union[EntryDocument, dict]]) -> None:
        """Add several documents in order."""
        for document in documents:
            self.add_entry(document)

    def add_entry(self, document: Union[EntryDocument, dict]) -> None:
        """
        Merge one document into the resolved table.

        Documents for another platform are ignored, as are value variants whose
        version range the configured version does not satisfy.
        Raises ConflictError or DuplicateError when a key/language is already set.
        """
        if isinstance(document, dict):
            document = EntryDocument.from_dict(document)

        if not document.applies_to(self.platform):
            logger.debug("Skipping %s: platform %s", document.title, document.platform)
            return

        for entry in document.entries:
            final_key = f"{document.base_name}{entry.key}" if document.base_name else entry.key
            for variant in entry.values:
                version_range = variant.semver_for(self.platform)
                if version_range and not version_satisfies(self.version, version_range):
                    logger.debug(
                        "Skipping %s in %s: %s does not satisfy %s",
                        final_key, document.title, self.version, version_range
                    )
                    continue

                resolved = self._entries.get(entry.key)
                if resolved is None:
                    resolved = ResolvedKeyEntry(
                        key=final_key,
                        source_key=entry.key,
                        type=entry.type,
                        do_not_translate=entry.do_not_translate,
                    )
                    self._entries[entry.key] = resolved
                    if final_key in self._resolved_keys:
                        logger.warning(
                            "Key %s from %s (%s) is also the resolved key of %s",
                            final_key, document.title, entry.key,
                            self._resolved_keys[final_key].source_key
                        )
                    self._resolved_keys.setdefault(final_key, resolved)

                existing = resolved.values.get(document.lang)
                if existing is not None:
                    if existing.title == document.title:
                        raise DuplicateError(final_key, document.lang, document.title)
                    raise ConflictError(final_key, document.lang, (existing.title, document.title))

                resolved.values[document.lang] = LanguageValue(
                    title=document.title,
                    payload=make_payload(entry.type, variant.value),
                    description=entry.description,
                )

    def _lookup(self, key: str) -> Optional[ResolvedKeyEntry]:
        resolved = self._entries.get(key)
        if resolved is None:
            resolved = self._resolved_keys.get(key)
        return resolved

    def get_entry(self, key: str) -> Optional[ResolvedKeyEntry]:
        """
        Return the resolved entry for a key, or None if it was never added.

        The unprefixed key is matched first. When several entries share a
        resolved key, the prefixed lookup returns the first one added.
        """
        return self._lookup(key)

    def get_all_values_for_string(self, key: str) -> Optional[dict[str, Any]]:
        """Return language -> value for a key, or None if it was never added."""
        resolved = self._lookup(key)
        if resolved is None:
            return None
        return resolved.plain_values()

    def localized_strings(self, culture: str, base_culture: str) -> list[LocalizedString]:
        """
        Build the strings table for one culture.

        Values missing in the culture fall back to the base culture. A comment
        equal to the previous row's comment is dropped.
        """
        rows = []
        last_comment = None
        for resolved in self._entries.values():
            culture_value = resolved.values.get(culture)
            base_value = resolved.values.get(base_culture)
            if culture_value is None and base_value is None:
                raise MissingBaseValueError(resolved.key, base_culture)

            comment = (
                (culture_value and culture_value.description)
                or (base_value and base_value.description)
                or f"From {(culture_value or base_value).title}"
            )
            text = culture_value.value if culture_value is not None else base_value.value
            rows.append(LocalizedString(
                key=resolved.key,
                text=text,
                comment=None if comment == last_comment else comment,
            ))
            last_comment = comment
        return rows

    def culture_tables(
        self,
        cultures: list[str],
        base_culture: Optional[str] = None
    ) -> dict[str, list[LocalizedString]]:
        """Build the strings table of every culture. The base defaults to the first culture."""
        if not cultures:
            raise ValidationError("At least one culture is required")
        base = base_culture or cultures[0]
        return {culture: self.localized_strings(culture, base) for culture in cultures}

    def accessor_strings(self, base_culture: str) -> list[AccessorString]:
        """Describe one accessor per key from its base-culture value."""
        accessors = []
        for resolved in self._entries.values():
            base_value = resolved.values.get(base_culture)
            if base_value is None:
                raise MissingBaseValueError(resolved.key, base_culture)
            value = base_value.value
            is_template = (
                self.platform is Platform.IOS
                and resolved.type != EntryType.PLURAL.value
                and isinstance(value, str)
                and IOS_TEMPLATE_PATTERN.search(value) is not None
            )
            accessors.append(AccessorString(key=resolved.key, value=value, is_template=is_template))
        return accessors

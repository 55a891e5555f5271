"""Data models for string resolution."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union


class Platform(Enum):
    """Platform tags a content document can target."""
    IOS = "ios"
    ANDROID = "android"
    ALL = "all"


class EntryType(Enum):
    """Known entry type tags."""
    STRING = "string"
    PLURAL = "plural"


@dataclass(frozen=True)
class StringValue:
    """A single localized string."""
    text: Any

    def plain(self) -> Any:
        return self.text


@dataclass(frozen=True)
class PluralValue:
    """A set of quantity forms (one, other, ...) consumed as a single unit."""
    forms: Any

    def plain(self) -> Any:
        return self.forms


ValuePayload = Union[StringValue, PluralValue]


def make_payload(entry_type: str, raw: Any) -> ValuePayload:
    """Wrap a raw JSON value in the payload variant matching the entry type."""
    if entry_type == EntryType.PLURAL.value:
        return PluralValue(raw)
    return StringValue(raw)


def _compact(data: dict) -> dict:
    return {k: v for k, v in data.items() if v is not None}


@dataclass
class EntryValue:
    """One value variant of an entry, optionally gated by version ranges."""
    value: Any
    ios_semver: Optional[str] = None
    android_semver: Optional[str] = None

    def semver_for(self, platform: Platform) -> Optional[str]:
        """Return the version range relevant to the given platform."""
        if platform is Platform.IOS:
            return self.ios_semver
        if platform is Platform.ANDROID:
            return self.android_semver
        return None

    def to_dict(self) -> dict:
        return _compact({
            "value": self.value,
            "iosSemver": self.ios_semver,
            "androidSemver": self.android_semver,
        })

    @classmethod
    def from_dict(cls, data: dict) -> "EntryValue":
        value = data.get("value")
        if value is None:
            # plural variants may carry their forms under "values"
            value = data.get("values")
        return cls(
            value=value,
            ios_semver=data.get("iosSemver"),
            android_semver=data.get("androidSemver"),
        )


@dataclass
class Entry:
    """A localizable key and its value variants."""
    key: str
    type: str = EntryType.STRING.value
    values: list[EntryValue] = field(default_factory=list)
    description: Optional[str] = None
    do_not_translate: Optional[bool] = None

    def to_dict(self) -> dict:
        return _compact({
            "key": self.key,
            "type": self.type,
            "description": self.description,
            "doNotTranslate": self.do_not_translate,
            "values": [v.to_dict() for v in self.values],
        })

    @classmethod
    def from_dict(cls, data: dict) -> "Entry":
        return cls(
            key=data["key"],
            type=data.get("type") or EntryType.STRING.value,
            values=[EntryValue.from_dict(v) for v in data.get("values", [])],
            description=data.get("description"),
            do_not_translate=data.get("doNotTranslate"),
        )


@dataclass
class EntryDocument:
    """A parsed content document contributed by one source."""
    title: str
    lang: str
    entries: list[Entry] = field(default_factory=list)
    platform: Optional[str] = None
    base_name: Optional[str] = None

    def applies_to(self, platform: Platform) -> bool:
        """Check whether this document should be merged for the given platform."""
        if not self.platform or self.platform == Platform.ALL.value:
            return True
        return self.platform == platform.value

    def to_dict(self) -> dict:
        return _compact({
            "title": self.title,
            "baseName": self.base_name,
            "lang": self.lang,
            "platform": self.platform,
            "entries": [e.to_dict() for e in self.entries],
        })

    @classmethod
    def from_dict(cls, data: dict) -> "EntryDocument":
        return cls(
            title=data.get("title", ""),
            lang=data["lang"],
            entries=[Entry.from_dict(e) for e in data.get("entries", [])],
            platform=data.get("platform"),
            base_name=data.get("baseName"),
        )


@dataclass
class LanguageValue:
    """The value one document supplied for a key in one language."""
    title: str
    payload: ValuePayload
    description: Optional[str] = None

    @property
    def value(self) -> Any:
        return self.payload.plain()


@dataclass
class ResolvedKeyEntry:
    """A key of the resolved table with its per-language values."""
    key: str
    source_key: str
    type: str = EntryType.STRING.value
    do_not_translate: Optional[bool] = None
    values: dict[str, LanguageValue] = field(default_factory=dict)

    def plain_values(self) -> dict[str, Any]:
        return {lang: v.value for lang, v in self.values.items()}


@dataclass
class LocalizedString:
    """A row of a per-culture strings table."""
    key: str
    text: Any
    comment: Optional[str] = None

    def to_dict(self) -> dict:
        return {"key": self.key, "text": self.text, "comment": self.comment}


@dataclass
class AccessorString:
    """What a code generator needs to emit an accessor for one key."""
    key: str
    value: Any
    is_template: bool = False

    def to_dict(self) -> dict:
        return {"key": self.key, "value": self.value, "isTemplate": self.is_template}


@dataclass
class ChangeRecord:
    """Raw before/after groupings of a key whose content changed."""
    before: Optional[dict]
    after: Optional[dict]

    def to_dict(self) -> dict:
        return {"before": self.before, "after": self.after}

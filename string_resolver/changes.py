"""Change detection between two sets of content documents."""

import logging
from typing import Any, Iterable, Optional, Union

from .loader import compute_content_hash
from .models import ChangeRecord, Entry, EntryDocument, EntryValue, Platform
from .resolver import EntryMerger

logger = logging.getLogger(__name__)

DocumentLike = Union[EntryDocument, dict]


def _as_document(document: DocumentLike) -> EntryDocument:
    if isinstance(document, dict):
        return EntryDocument.from_dict(document)
    return document


def _variant_record(document: EntryDocument, entry: Entry, variant: EntryValue) -> dict:
    record = variant.to_dict()
    # carry metadata on every variant so description/flag edits count as changes
    if entry.description is not None:
        record["description"] = entry.description
    if entry.do_not_translate is not None:
        record["doNotTranslate"] = entry.do_not_translate
    if document.base_name:
        record["baseName"] = document.base_name
    return record


def group_documents(documents: Iterable[DocumentLike]) -> dict:
    """
    Group documents as key -> platform -> lang -> type -> [variants].

    Every variant is kept, whatever its platform or version range.
    Documents without a platform are grouped under "all".
    """
    grouped: dict = {}
    for document in documents:
        document = _as_document(document)
        platform = document.platform or Platform.ALL.value
        for entry in document.entries:
            variants = (
                grouped.setdefault(entry.key, {})
                .setdefault(platform, {})
                .setdefault(document.lang, {})
                .setdefault(entry.type, [])
            )
            variants.extend(_variant_record(document, entry, v) for v in entry.values)
    return grouped


def change_detail(
    base_documents: Iterable[DocumentLike],
    target_documents: Iterable[DocumentLike]
) -> dict[str, ChangeRecord]:
    """
    Find the keys whose raw content differs between two document sets.

    Keys only present in the base set are not reported.
    """
    base = group_documents(base_documents)
    target = group_documents(target_documents)

    changes = {}
    for key, after in target.items():
        before = base.get(key)
        if before is not None and compute_content_hash(before) == compute_content_hash(after):
            continue
        changes[key] = ChangeRecord(before=before, after=after)
    return changes


def virtual_documents(key: str, grouping: dict, label: str) -> list[EntryDocument]:
    """Rebuild single-key documents from a grouping, one per platform/lang/type."""
    documents = []
    for platform, by_lang in grouping.items():
        for lang, by_type in by_lang.items():
            for entry_type, variants in by_type.items():
                entries = [
                    Entry(
                        key=key,
                        type=entry_type,
                        values=[EntryValue.from_dict(variant)],
                        description=variant.get("description"),
                        do_not_translate=variant.get("doNotTranslate"),
                    )
                    for variant in variants
                ]
                base_name = variants[0].get("baseName") if variants else None
                documents.append(EntryDocument(
                    title=f"{label} {key} [{platform}/{lang}/{entry_type}]",
                    lang=lang,
                    entries=entries,
                    platform=platform,
                    base_name=base_name,
                ))
    return documents


def replay(key: str, grouping: Optional[dict], platform: str, version: str, label: str) -> Optional[dict[str, Any]]:
    """Resolve one key's grouping for a platform and version."""
    if grouping is None:
        return None
    merger = EntryMerger(platform, version)
    merger.add_entries(virtual_documents(key, grouping, label))
    return merger.get_all_values_for_string(key)


def _as_change(change: Union[ChangeRecord, dict]) -> ChangeRecord:
    if isinstance(change, dict):
        return ChangeRecord(before=change.get("before"), after=change.get("after"))
    return change


def compute_changes(
    change_map: dict[str, Union[ChangeRecord, dict]],
    platform: str,
    version: str
) -> dict[str, Any]:
    """
    Reduce a change map to the values that differ for one platform and version.

    Returns key -> new value by language for every key whose resolved values
    are not identical before and after.
    """
    # validates platform and version even when there is nothing to replay
    EntryMerger(platform, version)

    result = {}
    for key, change in change_map.items():
        change = _as_change(change)
        before = replay(key, change.before, platform, version, "Before")
        after = replay(key, change.after, platform, version, "After")
        if before == after:
            logger.debug("Change to %s is not visible on %s %s", key, platform, version)
            continue
        result[key] = after
    return result

"""Record resolved references on both of their documents."""

from __future__ import annotations

import logging

from .models import Document, LinkRecord, Missing, Reference, Resolution

log = logging.getLogger(__name__)


def _key_pair(reference: Reference) -> tuple[str, str]:
    """Forward/backward metadata lists for a reference shape."""
    if reference.is_attribute:
        return "attributes", "attributed"
    return "forelinks", "backlinks"


def record(source: Document, reference: Reference, resolution: Resolution) -> None:
    """Append one reference to the graph.

    A found reference appends a record to the source's forward list and a
    mirrored record to the target's backward list; both carry the same
    ``type``. A missing reference appends its raw target to the source's
    ``missing`` list and touches no other document. Nothing is deduplicated.
    """
    if isinstance(resolution, Missing):
        source.refs.missing.append(resolution.raw_target)
        log.warning("Unresolved reference in %s: [[%s]]", source.url, resolution.raw_target)
        return

    target = resolution.document
    link_type = reference.type_label or ""
    forward, backward = _key_pair(reference)

    getattr(source.refs, forward).append(LinkRecord(type=link_type, url=target.url))
    getattr(target.refs, backward).append(LinkRecord(type=link_type, url=source.url))

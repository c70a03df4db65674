"""Ownership tags stored in the free-text description of a firewall entry.

The security group offers one ``Description`` per source address and no other
place to hang metadata, so every entry this system creates is tagged with::

    ownerid=<owner_id> ; nodename=<node_name>

Decoding is strict: anything that does not match the template exactly is not
ours. Values are embedded verbatim and nothing is escaped, which means owner
ids and node names must not contain the ``" ; "`` delimiter. Changing the
format would orphan every entry already tagged in a live security group.
"""

from __future__ import annotations

import re
from typing import NamedTuple

OWNER_FIELD = "ownerid"
NODE_FIELD = "nodename"
ANNOTATION_DELIMITER = " ; "
ANNOTATION_TEMPLATE = f"{OWNER_FIELD}={{owner_id}}{ANNOTATION_DELIMITER}{NODE_FIELD}={{node_name}}"

_ANNOTATION_PATTERN = re.compile(
    rf"{OWNER_FIELD}=(?P<owner_id>.*?){re.escape(ANNOTATION_DELIMITER)}"
    rf"{NODE_FIELD}=(?P<node_name>.*)",
    re.DOTALL,
)


class OwnerTag(NamedTuple):
    owner_id: str
    node_name: str


def encode_annotation(owner_id: str, node_name: str) -> str:
    """Return the description tagging an entry with ``owner_id`` and ``node_name``."""

    return ANNOTATION_TEMPLATE.format(owner_id=owner_id, node_name=node_name)


def decode_annotation(annotation: str | None) -> OwnerTag | None:
    """Parse a description produced by :func:`encode_annotation`.

    Returns ``None`` for missing, foreign or malformed descriptions; never raises.
    """

    if annotation is None:
        return None
    match = _ANNOTATION_PATTERN.fullmatch(annotation)
    if match is None:
        return None
    return OwnerTag(owner_id=match["owner_id"], node_name=match["node_name"])


def is_owned_by(annotation: str | None, owner_id: str) -> bool:
    tag = decode_annotation(annotation)
    return tag is not None and tag.owner_id == owner_id


def contains_delimiter(value: str) -> bool:
    return ANNOTATION_DELIMITER in value

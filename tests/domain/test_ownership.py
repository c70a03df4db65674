from __future__ import annotations

import pytest

from sgmanager.domain.ownership import (
    OwnerTag,
    contains_delimiter,
    decode_annotation,
    encode_annotation,
    is_owned_by,
)


def test_encode_annotation_uses_fixed_template() -> None:
    assert encode_annotation("team-a", "node1") == "ownerid=team-a ; nodename=node1"


@pytest.mark.parametrize(
    ("owner_id", "node_name"),
    [
        ("aaa", "aaa"),
        ("333", "333"),
        ("a-3", "a-3"),
        ("aaaaaaaaaaaaaaaaaa", "aaaaaaaaaaaaaaaaaa"),
        ("prod-eu", "ip-10-0-1-17.eu-west-1.compute.internal"),
        ("with space", "node with spaces"),
        ("", ""),
    ],
)
def test_decode_recovers_encoded_values(owner_id: str, node_name: str) -> None:
    assert decode_annotation(encode_annotation(owner_id, node_name)) == OwnerTag(owner_id, node_name)


@pytest.mark.parametrize(
    "annotation",
    [
        None,
        "",
        "Testing rule",
        "ownerid=team-a",
        "nodename=node1 ; ownerid=team-a",
        "ownerid=team-a; nodename=node1",
        "OWNERID=team-a ; NODENAME=node1",
        " ownerid=team-a ; nodename=node1",
        "prefix ownerid=team-a ; nodename=node1",
    ],
)
def test_decode_returns_none_for_foreign_or_malformed_descriptions(
    annotation: str | None,
) -> None:
    assert decode_annotation(annotation) is None


def test_owner_containing_delimiter_does_not_round_trip() -> None:
    annotation = encode_annotation("team ; nodename=evil", "node1")

    assert decode_annotation(annotation) != OwnerTag("team ; nodename=evil", "node1")
    assert contains_delimiter("team ; nodename=evil")
    assert not contains_delimiter("team;a")


def test_is_owned_by_requires_exact_owner_match() -> None:
    annotation = encode_annotation("team-a", "node1")

    assert is_owned_by(annotation, "team-a")
    assert not is_owned_by(annotation, "Team-A")
    assert not is_owned_by(annotation, "team")
    assert not is_owned_by("Testing rule", "team-a")
    assert not is_owned_by(None, "team-a")

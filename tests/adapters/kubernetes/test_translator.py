from __future__ import annotations

from sgmanager.adapters.kubernetes import NodeList, translate_node_addresses
from sgmanager.domain.ports.discovery import NodeAddress

from tests.helpers.kubernetes import load_kubernetes_fixture


def test_translate_node_addresses_filters_by_type() -> None:
    nodes = NodeList.model_validate(load_kubernetes_fixture("nodes_page_1.json")).items

    assert translate_node_addresses(nodes, address_type="ExternalIP") == [
        NodeAddress(name="worker-1", address="192.0.2.1"),
    ]
    assert translate_node_addresses(nodes, address_type="InternalIP") == [
        NodeAddress(name="worker-1", address="10.0.1.12"),
        NodeAddress(name="worker-2", address="10.0.1.13"),
    ]


def test_translate_node_addresses_emits_every_matching_address() -> None:
    nodes = NodeList.model_validate(load_kubernetes_fixture("nodes_page_2.json")).items

    assert translate_node_addresses(nodes, address_type="ExternalIP") == [
        NodeAddress(name="worker-3", address="192.0.2.3"),
        NodeAddress(name="worker-3", address="2001:db8::3"),
    ]


def test_node_list_treats_blank_continue_token_as_last_page() -> None:
    first = NodeList.model_validate(load_kubernetes_fixture("nodes_page_1.json"))
    last = NodeList.model_validate(load_kubernetes_fixture("nodes_page_2.json"))

    assert first.metadata.continue_token is not None
    assert last.metadata.continue_token is None


def test_node_without_status_has_no_addresses() -> None:
    node_list = NodeList.model_validate({"kind": "NodeList", "items": [{"metadata": {"name": "x"}}]})

    assert translate_node_addresses(node_list.items, address_type="ExternalIP") == []

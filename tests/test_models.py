import json

import pytest

from cdc_ingest.models import CDCEvent, InvalidEventError, parse_event

SERVICE_JSON = """{
    "before": null,
    "after": {
        "key": "c/123/o/service/456",
        "value": {
            "object": {"name": "test-service", "id": "456"}
        }
    }
}"""

NODE_JSON = """{
    "before": {"id": "old-id"},
    "after": {
        "key": "c/123/o/node/789",
        "value": {
            "object": {"hostname": "test-node", "id": "789"}
        }
    }
}"""


def test_valid_service_event():
    event = parse_event(SERVICE_JSON)
    expected = CDCEvent(
        key="c/123/o/service/456",
        document={"name": "test-service", "id": "456"},
        before=None,
    )
    assert event == expected
    assert event.to_dict() == expected.to_dict()


def test_valid_node_event():
    event = parse_event(NODE_JSON)
    expected = CDCEvent(
        key="c/123/o/node/789",
        document={"hostname": "test-node", "id": "789"},
        before={"id": "old-id"},
    )
    assert event == expected
    assert event.to_json() == expected.to_json()


def test_invalid_json():
    with pytest.raises(InvalidEventError):
        parse_event("{invalid")


def test_missing_required_fields():
    with pytest.raises(InvalidEventError, match="after.key"):
        parse_event('{"before": null}')


def test_missing_object():
    with pytest.raises(InvalidEventError, match="after.value.object"):
        parse_event('{"after": {"key": "c/1/o/service/2", "value": {}}}')


def test_null_object_is_missing():
    with pytest.raises(InvalidEventError, match="after.value.object"):
        parse_event('{"after": {"key": "c/1/o/service/2", "value": {"object": null}}}')


def test_non_string_key_rejected():
    with pytest.raises(InvalidEventError):
        parse_event('{"after": {"key": 5, "value": {"object": {"id": "x"}}}}')


def test_after_must_be_object():
    with pytest.raises(InvalidEventError):
        parse_event('{"after": [1, 2]}')


def test_top_level_array_rejected():
    with pytest.raises(InvalidEventError):
        parse_event("[]")


def test_bytes_input():
    event = parse_event(SERVICE_JSON.encode("utf-8"))
    assert event.key == "c/123/o/service/456"
    assert event.document == {"name": "test-service", "id": "456"}


def test_mapping_input():
    event = parse_event(json.loads(NODE_JSON))
    assert event.before == {"id": "old-id"}


def test_json_round_trip():
    event = CDCEvent(key="c/123/o/node/789", document={"hostname": "test-node", "id": "789"})
    assert parse_event(event.to_json()) == event


def test_to_dict_layout():
    event = parse_event(SERVICE_JSON)
    assert event.to_dict() == json.loads(SERVICE_JSON)
import pytest

from cdc_ingest.entity import CDCEntityExtractor
from cdc_ingest.models import CDCEvent
from cdc_ingest.processor import CDCEventProcessor


class MockDocumentIndexer:
    def __init__(self, should_fail=False):
        self.indexed_docs = {}
        self.should_fail = should_fail

    def index_document(self, index_name, doc_id, document):
        if self.should_fail:
            raise RuntimeError("mock indexing error")
        self.indexed_docs[f"{index_name}/{doc_id}"] = document


class MockEntityExtractor:
    """Expects keys of the form ``c/{cluster}/o/{type}/{id}``."""

    def __init__(self, should_fail=False):
        self.should_fail = should_fail

    def extract_entity_info(self, key, value):
        if self.should_fail:
            raise RuntimeError("mock extraction error")
        parts = [part for part in key.split("/") if part]
        if len(parts) >= 5:
            return parts[3], parts[4]
        raise ValueError("invalid key format")


SERVICE_EVENT = CDCEvent(
    key="c/123/o/service/456",
    document={"name": "test-service", "id": "456"},
)
NODE_EVENT = CDCEvent(
    key="c/123/o/node/789",
    document={"hostname": "test-node", "id": "789"},
)


@pytest.mark.parametrize(
    ("event", "expected_key"),
    [
        (SERVICE_EVENT, "test-index-service/456"),
        (NODE_EVENT, "test-index-node/789"),
    ],
)
def test_valid_events_are_indexed(event, expected_key):
    indexer = MockDocumentIndexer()
    processor = CDCEventProcessor(indexer, MockEntityExtractor(), "test-index")

    processor.process_event(event)

    assert indexer.indexed_docs == {expected_key: event.document}


def test_indexer_failure_propagates():
    indexer = MockDocumentIndexer(should_fail=True)
    processor = CDCEventProcessor(indexer, MockEntityExtractor(), "test-index")

    with pytest.raises(RuntimeError, match="mock indexing error"):
        processor.process_event(SERVICE_EVENT)
    assert indexer.indexed_docs == {}


def test_extractor_failure_propagates_and_nothing_is_indexed():
    indexer = MockDocumentIndexer()
    processor = CDCEventProcessor(indexer, MockEntityExtractor(should_fail=True), "test-index")
    event = CDCEvent(key="invalid/key", document={"name": "test-service"})

    with pytest.raises(RuntimeError, match="mock extraction error"):
        processor.process_event(event)
    assert indexer.indexed_docs == {}


def test_real_extractor_uses_type_segment_and_object_id():
    indexer = MockDocumentIndexer()
    processor = CDCEventProcessor(indexer, CDCEntityExtractor(), "test-index")

    processor.process_event(SERVICE_EVENT)

    assert indexer.indexed_docs == {"test-index-service/456": SERVICE_EVENT.document}
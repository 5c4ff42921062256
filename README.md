# cdc_ingest

Building blocks for a change-data-capture (CDC) ingestion pipeline. The package
reads CDC events from a file and publishes them through a message producer. It
also takes consumed messages, decodes them into events and indexes each event's
document in OpenSearch, with one index for each entity type.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Event format

Each event is a JSON object. It must have a non-empty string `after.key` and a
non-null `after.value.object`:

```json
{"before": null, "after": {"key": "c/123/o/service/456", "value": {"object": {"id": "456", "name": "svc"}}}}
```

`cdc_ingest.models.parse_event(data)` accepts JSON text (`str` or `bytes`) or a
mapping that has already been decoded, and returns a `CDCEvent`. The event has
`key`, `document` and `before` attributes. `parse_event` raises
`InvalidEventError`, a `ValueError`, in these cases:

- the JSON is malformed;
- a field that should be an object is not one;
- a required field is missing.

`CDCEvent.to_dict()` returns the event in the layout shown above.
`CDCEvent.to_json()` returns the same layout as compact JSON.

## Configuration

```python
from cdc_ingest.config import load_config

config = load_config()                       # searches the current directory
config = load_config(["/etc/cdc"], {"APP_KAFKA.TOPIC": "events"})
```

`load_config(search_paths, environ)` reads the first `application.yaml` or
`application.yml` it finds in the search paths. The search paths default to
`["."]` and the environment defaults to `os.environ`. Each value is resolved in
this order, and the first one that applies wins:

1. a non-empty environment variable named `APP_<SECTION>.<KEY>` in upper case,
   for example `APP_KAFKA.BROKERS` or `APP_OPENSEARCH.INDEX_PREFIX`;
2. a non-null value in the file;
3. the default.

Where a list is expected, a comma-separated string is split. If no file is
found, `ConfigError` is raised. It is also raised if the file cannot be read or
parsed, if the file's top level is not a mapping, or if a value cannot be
converted.

The result is a `Config` with these sections:

| Section      | Field                            | Default                     |
|--------------|----------------------------------|-----------------------------|
| `kafka`      | `brokers`                        | `["localhost:9092"]`        |
|              | `topic`                          | `cdc-events`                |
|              | `group_id`                       | `cdc-consumer-group`        |
|              | `client_id`                      | `cdc-client`                |
|              | `topic_config.partitions`        | `0`                         |
|              | `topic_config.replication_factor`| `0`                         |
| `opensearch` | `hosts`                          | `["http://localhost:9200"]` |
|              | `index_prefix`                   | `cdc`                       |
| `producer`   | `input_file`                     | `stream.jsonl`              |
| `consumer`   | `batch_size`                     | `100`                       |
|              | `commit_interval`                | `1s`                        |
| `log`        | `level`                          | `info`                      |
|              | `format`                         | `json`                      |

## Reading and producing events

```python
from cdc_ingest.reader import EventReader
from cdc_ingest.producer import KafkaEventProducer

with EventReader("stream.jsonl") as reader, KafkaEventProducer(sync_producer, "cdc-events") as producer:
    for event in reader:
        producer.produce_event(event)
```

`EventReader` reads JSON values one after another from a file. They may be
separated by any whitespace, so JSON Lines works. `read_event()` returns the
next `CDCEvent`, or `None` at the end of the file. Iterating over the reader
yields events until the end.

Errors are handled as follows:

- If a value decodes but fails validation, `InvalidEventError` is raised and
  the next read goes on with the following value.
- If the JSON is malformed, `InvalidEventError` is raised, and it is raised
  again on every later read.

`sync_producer` is any object that has the `SyncProducer` interface:

- `send_message(message)`, which returns `(partition, offset)`;
- `close()`.

`KafkaEventProducer.produce_event` builds a `ProducerMessage` for the
producer's topic. The message's key is the event's key and its value is the
event's JSON. Errors from `send_message` are logged and re-raised. When the
producer closes, it closes the underlying producer.

## Consuming and indexing

```python
from cdc_ingest.entity import CDCEntityExtractor
from cdc_ingest.indexer import OpenSearchIndexer
from cdc_ingest.processor import CDCEventProcessor
from cdc_ingest.handler import ConsumerMessage, ConsumerSession, KafkaConsumerHandler

processor = CDCEventProcessor(
    OpenSearchIndexer(["http://localhost:9200"], None),
    CDCEntityExtractor(),
    "cdc",
)
handler = KafkaConsumerHandler(processor)
session = ConsumerSession()
handler.consume_claim(session, [ConsumerMessage(value=b'{"after": {...}}')])
```

For a key such as `c/123/o/service/456`, `CDCEntityExtractor` takes the
second-to-last `/` segment (`service`) as the entity type, and the object's
string `id` as the document id. It raises a subclass of `EntityError` in these
cases:

- `InvalidKeyError`: the key has fewer than four segments;
- `InvalidObjectError`: the object is not a mapping;
- `MissingIDError`: the object has no string `id`.

`CDCEventProcessor.process_event` indexes the document into
`<prefix>-<entity type>`, for example `cdc-service`. Errors from the extractor
or the indexer propagate to the caller.

`OpenSearchIndexer` sends `PUT /<index>/_doc/<id>` with the document as JSON,
and rotates through the hosts it was given. The host list defaults to
`http://localhost:9200`. It retries on the next host up to three times after
connection errors and after 502, 503 or 504 answers. Any other HTTP answer is
accepted. It raises `IndexingError` in two cases: the document cannot be
serialised, or every attempt fails to connect.

`KafkaConsumerHandler.consume_claim(session, messages)` handles messages until
one of these happens:

- the iterable runs out;
- a `None` arrives;
- `session.cancelled` is set.

The handler marks every message on the session, including messages that fail
to decode or to process, so one bad message never stalls the stream. `setup`
and `cleanup` do nothing.

## What the package does not do

The package has no broker client and no command-line programs. To publish
events, pass your own `SyncProducer`. To consume them, feed
`KafkaConsumerHandler.consume_claim` from your own consumer loop. Shutdown and
signal handling are also left to the caller.
import logging
from collections.abc import Sequence
from typing import Any
from elasticsearch import Elasticsearch, NotFoundError, ConnectionError as EsConnectionError, ConnectionTimeout
from productsearch.backends.base import SearchResult, BulkItemResult
from productsearch.errors import BackendUnavailable, BulkSaveError

logger = logging.getLogger(__name__)

_TRANSPORT_ERRORS = (EsConnectionError, ConnectionTimeout)


def create_client(settings) -> Elasticsearch:
    """Build an Elasticsearch client from application settings."""
    kwargs: dict[str, Any] = {"request_timeout": settings.ELASTICSEARCH_REQUEST_TIMEOUT}
    if settings.ELASTICSEARCH_PASSWORD:
        kwargs["basic_auth"] = (settings.ELASTICSEARCH_USER, settings.ELASTICSEARCH_PASSWORD)
    if settings.ELASTICSEARCH_CA_CERTS:
        kwargs["ca_certs"] = settings.ELASTICSEARCH_CA_CERTS
    return Elasticsearch(settings.ELASTICSEARCH_URL, **kwargs)


class ElasticsearchBackend:
    """Search backend talking to an Elasticsearch 8 cluster.

    Queries are ``multi_match`` over the requested fields, windowed with
    ``from``/``size``. ``refresh`` is passed to bulk requests; set it to
    ``"wait_for"`` when writes must be searchable as soon as ``save`` returns.
    """

    def __init__(self, client: Elasticsearch, refresh: bool | str = False):
        self._client = client
        self._refresh = refresh

    def get_by_id(self, index: str, doc_id: str) -> dict[str, Any] | None:
        try:
            resp = self._client.get(index=index, id=doc_id)
        except NotFoundError:
            return None
        except _TRANSPORT_ERRORS as e:
            raise _unavailable(e) from e
        return {**resp["_source"], "id": resp["_id"]}

    def search(
        self,
        index: str,
        text: str,
        fields: Sequence[str],
        offset: int,
        limit: int,
    ) -> SearchResult:
        try:
            resp = self._client.search(
                index=index,
                query={"multi_match": {"query": text, "fields": list(fields)}},
                from_=offset,
                size=limit,
            )
        except NotFoundError:
            logger.debug("Index %s does not exist, no hits", index)
            return SearchResult(total_hits=0)
        except _TRANSPORT_ERRORS as e:
            raise _unavailable(e) from e

        hits = resp["hits"]
        return SearchResult(
            total_hits=hits["total"]["value"],
            items=[{**hit["_source"], "id": hit["_id"]} for hit in hits["hits"]],
        )

    def bulk_upsert(self, index: str, documents: Sequence[dict[str, Any]]) -> list[BulkItemResult]:
        operations: list[dict[str, Any]] = []
        for doc in documents:
            action: dict[str, Any] = {"_index": index}
            if doc.get("id") is not None:
                action["_id"] = doc["id"]
            operations.append({"index": action})
            operations.append(doc)

        try:
            resp = self._client.bulk(operations=operations, refresh=self._refresh)
        except _TRANSPORT_ERRORS as e:
            raise _unavailable(e) from e

        # Bulk responses list one item per action, in request order
        outcomes = [item["index"] for item in resp["items"]]
        if resp.get("errors"):
            failed = [i for i, outcome in enumerate(outcomes) if "error" in outcome]
            logger.error("Bulk indexing into %s failed for positions %s", index, failed)
            raise BulkSaveError(f"Bulk indexing failed for {len(failed)} document(s)", positions=failed)

        return [BulkItemResult(position=i, assigned_id=outcome["_id"]) for i, outcome in enumerate(outcomes)]


def _unavailable(e: Exception) -> BackendUnavailable:
    logger.error("Elasticsearch unavailable: %s", e)
    return BackendUnavailable(f"Elasticsearch unavailable: {e}")

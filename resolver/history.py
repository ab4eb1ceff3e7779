"""
History query builder — aggregation queries over framework snapshots.

The index holds many snapshots per framework: one every collection cycle, for
every attempt. Each document looks like:

    {"collectTime": "...", "objectSnapshot": {<framework object>}}

Both queries filter by framework uid (names are reused after deletion, uids
never are) and keep only the newest snapshot per attempt:

    all attempts:   terms(attempt id, desc) → top_hits(collectTime desc, 1)
    one attempt:    filter(attempt id == N) → top_hits(collectTime desc, 1)

Zero buckets / zero hits is a normal answer: no history recorded.
"""

UID_FIELD = "objectSnapshot.metadata.uid.keyword"
ATTEMPT_ID_FIELD = "objectSnapshot.status.attemptStatus.id"
COLLECT_TIME_FIELD = "collectTime"

GROUP_AGG = "attemptID_group"
LATEST_HITS_AGG = "collectTime_latest_hits"


def _uid_filter(uid: str) -> dict:
    return {"bool": {"filter": {"term": {UID_FIELD: uid}}}}


def _latest_hit() -> dict:
    return {
        LATEST_HITS_AGG: {
            "top_hits": {
                "sort": [{COLLECT_TIME_FIELD: {"order": "desc"}}],
                "size": 1,
            },
        },
    }


def build_all_attempts_query(uid: str, max_attempts: int = 100) -> dict:
    """Latest snapshot of every attempt of a framework, newest attempt first."""
    return {
        "query": _uid_filter(uid),
        "size": 0,
        "aggs": {
            GROUP_AGG: {
                "terms": {
                    "field": ATTEMPT_ID_FIELD,
                    "order": {"_key": "desc"},
                    "size": max_attempts,
                },
                "aggs": _latest_hit(),
            },
        },
    }


def build_single_attempt_query(uid: str, attempt_index: int) -> dict:
    """Latest snapshot of one attempt of a framework."""
    return {
        "query": _uid_filter(uid),
        "size": 0,
        "aggs": {
            GROUP_AGG: {
                "filter": {"term": {ATTEMPT_ID_FIELD: attempt_index}},
                "aggs": _latest_hit(),
            },
        },
    }


def extract_attempt_snapshots(result: dict) -> list[dict]:
    """
    Pull one framework snapshot per bucket out of an all-attempts response.

    Bucket order is preserved (descending attempt id).
    """
    group = (result.get("aggregations") or {}).get(GROUP_AGG) or {}
    snapshots = []
    for bucket in group.get("buckets") or []:
        hits = bucket[LATEST_HITS_AGG]["hits"]["hits"]
        if hits:
            snapshots.append(hits[0]["_source"]["objectSnapshot"])
    return snapshots


def extract_single_snapshot(result: dict) -> dict | None:
    """Framework snapshot from a single-attempt response, or None if there is none."""
    group = (result.get("aggregations") or {}).get(GROUP_AGG) or {}
    hits = ((group.get(LATEST_HITS_AGG) or {}).get("hits") or {}).get("hits") or []
    if not hits:
        return None
    return hits[0]["_source"]["objectSnapshot"]

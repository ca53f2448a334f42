import json
from typing import Dict, Mapping, Tuple

from tempest.models import EndpointKind


def derive_key(kind: EndpointKind, params: Mapping[str, str]) -> str:
    """
    Build the cache key for a logical request.

    The key is the endpoint kind followed by the JSON encoding of the
    sorted parameter pairs, so parameter order never matters and the
    request can be read back from the key with ``parse_key``.

    Args:
        kind: Upstream endpoint kind
        params: Request parameters

    Returns:
        Cache key string, e.g. ``current_weather:[["q","London"]]``
    """
    pairs = sorted((str(k), str(v)) for k, v in params.items())
    return f"{kind.value}:{json.dumps(pairs, separators=(',', ':'), ensure_ascii=False)}"


def parse_key(key: str) -> Tuple[EndpointKind, Dict[str, str]]:
    """Reverse of derive_key"""
    kind, _, encoded = key.partition(':')
    return EndpointKind(kind), {k: v for k, v in json.loads(encoded)}

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional, Sequence

from tempest.models import (
    AggregateOutcome,
    AggregatePolicy,
    ErrorKind,
    Failure,
    FetchResult,
    LogicalRequest,
    Success,
)
from tempest.services.weather_api import WeatherAPI
from tempest.utils.cache import WeatherCache
from tempest.utils.keys import derive_key

logger = logging.getLogger(__name__)


class WeatherGateway:
    """
    Cached access to the upstream provider.

    ``fetch`` resolves one logical request through the cache; ``run``
    resolves several of them concurrently and assembles the results by
    position. Concurrent misses on the same key may both go upstream;
    the last write to the cache wins.
    """

    def __init__(self, cache: WeatherCache, fetcher: WeatherAPI, ttl: Optional[float] = None, lookups=None):
        self.cache = cache
        self.fetcher = fetcher
        self.ttl = ttl
        self.lookups = lookups

    def _count(self, request: LogicalRequest, outcome: str):
        if self.lookups is not None:
            self.lookups.labels(kind=request.kind.value, outcome=outcome).inc()

    def fetch(self, request: LogicalRequest) -> FetchResult:
        key = derive_key(request.kind, request.params)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for {key}")
            self._count(request, 'hit')
            return Success(cached)

        self._count(request, 'miss')
        result = self.fetcher.fetch(request.kind, request.params)
        if result.ok:
            self.cache.put(key, result.document, self.ttl)
            return result

        return Failure(result.kind, result.message, status=result.status, request=request)

    def run(self, requests: Sequence[LogicalRequest],
            policy: AggregatePolicy = AggregatePolicy.ALL_OR_NOTHING) -> AggregateOutcome:
        """
        Resolve requests concurrently.

        Args:
            requests: Ordered logical requests
            policy: ALL_OR_NOTHING returns on the first observed failure;
                BEST_EFFORT waits for every member, then fails with the
                first observed failure if there is one

        Returns:
            AggregateOutcome whose documents match the input order
        """
        outcomes: List[Optional[FetchResult]] = [None] * len(requests)
        if not requests:
            return AggregateOutcome(documents=[], outcomes=outcomes)

        # one worker per member, owned by this call, so members never queue
        # behind each other or behind another client's aggregate
        pool = ThreadPoolExecutor(max_workers=len(requests), thread_name_prefix='tempest-fetch')
        first_failure = None
        try:
            futures = {pool.submit(self.fetch, request): index
                       for index, request in enumerate(requests)}

            for future in as_completed(futures):
                index = futures[future]
                result = future.result()
                outcomes[index] = result
                if result.ok or first_failure is not None:
                    continue

                first_failure = Failure(
                    ErrorKind.AGGREGATE_MEMBER_FAILED,
                    result.message,
                    status=result.status,
                    request=requests[index],
                    member=result,
                    index=index,
                )
                logger.warning(f"Aggregate member {index} ({requests[index].kind.value}) failed: "
                               f"{result.kind.value}: {result.message}")

                if policy is AggregatePolicy.ALL_OR_NOTHING:
                    break
        finally:
            # siblings already running finish on their own and may still fill the cache
            pool.shutdown(wait=False, cancel_futures=True)

        if first_failure is not None:
            return AggregateOutcome(failure=first_failure, outcomes=outcomes)

        return AggregateOutcome(documents=[outcome.document for outcome in outcomes], outcomes=outcomes)

    def shutdown(self):
        self.fetcher.close()

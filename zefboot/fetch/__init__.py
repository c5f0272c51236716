from zefboot.fetch.backoff import ExponentialBackoff, FixedBackoff
from zefboot.fetch.fetcher import CancellationToken, PollFetcher

__all__ = ["CancellationToken", "ExponentialBackoff", "FixedBackoff", "PollFetcher"]

from prometheus_client import Counter, Histogram

# Prometheus metrics
LOOKUP_REQUESTS = Counter(
    "registry_lookup_requests_total",
    "Lookup requests by outcome",
    ["outcome"],  # match, no_match, invalid, error
)
LOOKUP_DURATION = Histogram(
    "registry_lookup_duration_seconds",
    "Time spent serving a lookup request",
)
LOOKUP_CACHE_RESULTS = Counter(
    "registry_lookup_cache_total",
    "Lookup cache reads by result",
    ["result"],  # hit, miss
)

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Summary,
    generate_latest,
)

NAMESPACE = "latencytest"
VERSION = "v0.1.0"


class LoadtestMetrics:
    """Owns the registry and the four aggregates the server records into."""

    def __init__(self, registry: CollectorRegistry = None):
        self.registry = registry if registry is not None else CollectorRegistry()
        self.response_time = Summary(
            "response_time_seconds", "Request response times",
            namespace=NAMESPACE, registry=self.registry,
        )
        self.version = Gauge(
            "version", "Version information about this binary", ["version"],
            namespace=NAMESPACE, registry=self.registry,
        )
        self.requests = Counter(
            "requests_total", "Count of all HTTP requests", ["code", "method"],
            namespace=NAMESPACE, registry=self.registry,
        )
        self.sizes = Counter(
            "size_by_path_total", "Count of size sent by path", ["path", "method"],
            namespace=NAMESPACE, registry=self.registry,
        )
        self.version.labels(version=VERSION).set(1)

    def render(self):
        return generate_latest(self.registry), CONTENT_TYPE_LATEST

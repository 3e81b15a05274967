from __future__ import annotations

from recipe_ingest.app.domain.models import SourceOrigin


class ServiceError(Exception):
    kind = "service_error"
    public_message = "Recipe extraction failed"


class FetchError(ServiceError):
    kind = "fetch_error"
    public_message = "Could not fetch source data"

    def __init__(self, origin: SourceOrigin, message: str):
        super().__init__(f"[{origin.value}] {message}")
        self.origin = origin
        self.message = message


class InvalidURLError(FetchError):
    pass


class NetworkTimeoutError(FetchError):
    def __init__(self, origin: SourceOrigin, url: str, timeout_seconds: float):
        super().__init__(origin, f"Network timeout after {timeout_seconds}s: {url}")
        self.url = url
        self.timeout_seconds = timeout_seconds


class ModelCallError(ServiceError):
    kind = "model_call_error"


class RateLimitedError(ModelCallError):
    kind = "rate_limited"
    public_message = "Model rate limit reached, try again shortly"


class GeminiConfigurationError(ModelCallError):
    pass


class MalformedOutputError(ServiceError):
    kind = "malformed_output"
    public_message = "Could not extract recipe from source"

    def __init__(self, message: str, snippet: str = ""):
        super().__init__(message)
        self.snippet = snippet

from jobflow.errors import AIServiceError, RateLimitError, looks_rate_limited


class _StatusError(Exception):
    status_code = 429


def test_rate_limit_detection():
    assert looks_rate_limited(RateLimitError("x"))
    assert looks_rate_limited(_StatusError("boom"))
    assert looks_rate_limited(Exception("RESOURCE_EXHAUSTED: quota"))
    assert looks_rate_limited(Exception("Too Many Requests"))
    assert not looks_rate_limited(AIServiceError("connection reset"))

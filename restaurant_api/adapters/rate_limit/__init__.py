"""Rate limiting adapters.

The HTTP layer depends on ``AbstractRateLimiter`` only, so the in-memory
sliding window can be replaced by a shared store without touching routes.
"""

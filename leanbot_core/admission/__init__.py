from leanbot_core.admission.rate_limiter import ADMITTED, AdmissionDecision, RateLimiter

__all__ = ["ADMITTED", "AdmissionDecision", "RateLimiter"]

"""AuraConnect backend.

A small FastAPI service:
- Account signup/login with httpOnly JWT session cookies
- A contact form (write-only messages)
- One subscription plan per user (starter / pro / enterprise)

Session state lives entirely in the signed token; nothing is kept server-side.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"

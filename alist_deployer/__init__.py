"""Alist + Caddy single-host deployer.

Core design goals:
- Idempotent provisioning steps
- Explicit configuration passed to every step
- Fail fast on any broken precondition or docker command
- Centralized logging
"""

__all__ = []

"""Numeric limits and timeouts - no circular dependencies."""

from __future__ import annotations

# Applied to socket connect and each blocking read/write of a request.
SOCKET_TIMEOUT = 30.0

# Liveness probe when listing discovered endpoints.
PROBE_TIMEOUT = 0.25

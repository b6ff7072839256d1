"""Release bounded context.

Cross-layer contracts shared by the CLI front-end and the release services:
- contracts: normalized requests and the single outcome of a workflow run
- errors: the canonical error payload
"""

from __future__ import annotations

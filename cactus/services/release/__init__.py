"""Release orchestration services.

- planner: next version and derived branch/tag names
- credentials: authentication material for a remote
- history: commits a publish would introduce
- review: fail-closed human sign-off
- auth / publish: push a plan and verify every ref
- bump / manifest: version bump collaborator and manifest reading
- driver: the cut and tag workflows
"""

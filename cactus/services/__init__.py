"""Service layer: release orchestration built on the git and platform adapters."""

"""git-cactus: release branch and tag automation for semver projects."""

__version__ = "0.3.0"

"""release-with-ease: AI-assisted semver bump, changelog entry, npm version and push."""

__version__ = "0.1.0"

"""Library surface for allow-list tooling (`allowlist.api.profile`, `allowlist.api.config`)."""

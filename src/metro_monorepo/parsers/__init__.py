"""Readers for workspace manifests (package.json, lerna.json, pnpm-workspace.yaml)."""

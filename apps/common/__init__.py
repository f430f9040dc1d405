"""Shared building blocks: money arithmetic, soft-delete and append-only model bases."""

"""Infrastructure layer for uploads app.

This package contains integrations with external systems:
- Database engine specifics (store size, compaction)
- Chunk-backed seekable reader
- Metadata helpers (MIME type, extensions, block reads)

Keep infrastructure concerns separate from business logic.
"""

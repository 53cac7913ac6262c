"""Business logic layer for uploads app.

This package contains all business logic of the chunked store:
- Account limits and upload precheck
- Streaming insert, lookup, listing, expire-now, reading
- Statistics for quotas and pagination
- Schema management and maintenance (cleanup, vacuum)

All business logic should be implemented here, separate from
models (data layer) and infrastructure (engine specifics).
"""

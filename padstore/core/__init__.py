"""
Core infrastructure package for padstore.

Modules:
- config    : Environment-derived Settings with strict PORT/EXPIRY_DAYS parsing.
- db        : Pooled database handle with startup probe and schema creation.
- documents : DocumentStore (load / upsert / count) over the `document` table.
- errors    : Error taxonomy shared by the store and bootstrap.
- keepalive : Self-ping scheduler and target URL resolution.
- logging   : Console/file logging setup.
- models    : Pydantic models used across services.
"""

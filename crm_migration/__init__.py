"""
CRM Migration

Moves contacts and tasks from a Zoho CRM account into a Twenty workspace.

Supports:
- One generic fetch -> map -> batched write pipeline per entity type
- Client-side request-rate capping per API
- Fixed pacing between destination batches
- Dry runs and offline previews of the mapped payloads
"""

__version__ = "0.1.0"

"""Usage domain — monthly ledger, snapshot builder, count synchronizer.

Use the container's ``usage_ledger`` to record log ingestion and AI calls,
``snapshot_builder`` + ``entitlement_service`` to answer "is this allowed",
and ``resource_sync`` after creating or deleting checks and API keys.
"""

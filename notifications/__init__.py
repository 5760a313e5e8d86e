"""Multi-tenant notification store, access layer and real-time fan-out."""

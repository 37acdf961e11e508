"""
Prefect flows for dataset maintenance.

Flows:
- refresh: Download the dataset (when a URL is configured) and validate a load

Usage (local):
    python -m tick_tracker.flows.refresh

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    prefect deployment run 'refresh-dataset/default'
"""

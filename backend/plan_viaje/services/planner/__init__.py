"""Trip planner: category pipelines for the plan-viaje endpoint.

Modules:
    config          Category catalogue, fetch limits and scoring weights
    errors          Request-level error taxonomy
    records         Raw Airtable records to CategoryRecord
    scoring         Locality/category filters and desirability scores
    variety         Seeded, reproducible shuffle of the ranked pool
    orchestrator    Concurrent fan-out and response assembly

Pipeline (one per category, all four concurrently):
    AirtableClient.fetch_all → normalize → SELECTORS[key] → variety.pick
"""

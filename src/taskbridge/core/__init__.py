"""Core domain: models, ports, encoding, enrichment and dispatch."""

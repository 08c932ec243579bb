"""Live request log feed for the gateway dashboard."""

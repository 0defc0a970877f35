"""Domain core: models, ports, aggregation, alerting and export."""

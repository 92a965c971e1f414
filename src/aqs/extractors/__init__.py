"""Query builders and fixed-endpoint shortcuts for the AQS data services."""

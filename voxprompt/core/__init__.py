"""Core services: persistence, AI gateway, request pipelines."""

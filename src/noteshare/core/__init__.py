"""Core domain: models, repositories, schemas, services and access rules."""

"""Keycloak bridge core: domain objects and host contracts only."""

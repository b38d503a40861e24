"""Keycloak bridge entities."""

from .login_attempt import FlowState, LoginAttempt

__all__ = ["FlowState", "LoginAttempt"]

"""Clients for the remote CRM platform."""

from .ghl_client import LeadConnectorClient

__all__ = ["LeadConnectorClient"]

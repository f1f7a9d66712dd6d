"""
Client generation.

This module provides the Insightly client, its request builder and the
helper that wires both to saved settings.
"""

from .crm_client import InsightlyClient, is_existing_record
from .request import OutboundRequest, new_request
from .builder import generate_client

__all__ = [
    "InsightlyClient",
    "is_existing_record",
    "OutboundRequest",
    "new_request",
    "generate_client",
]

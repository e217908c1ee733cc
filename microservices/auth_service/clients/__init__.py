"""
Auth Service Clients

External collaborators used by the auth service.
"""

from .sms_client import SMSClient

__all__ = ["SMSClient"]

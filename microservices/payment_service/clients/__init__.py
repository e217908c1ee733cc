"""
Payment Service Clients Module

HTTP clients for the payment gateway and the order service
"""

from .order_client import OrderClient
from .razorpay_client import RazorpayClient

__all__ = [
    "OrderClient",
    "RazorpayClient"
]

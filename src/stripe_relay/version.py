SERVICE_NAME = "stripe-relay"
__version__ = "1.0.0"

"""Adapters implementing the service-layer ports with concrete technology."""

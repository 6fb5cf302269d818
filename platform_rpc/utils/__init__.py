"""Payload encoding helpers shared by the requester and transport."""

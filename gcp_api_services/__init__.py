"""Clients for the Google APIs the studio talks to."""

"""Outbound request handlers for the PAPI proxy."""

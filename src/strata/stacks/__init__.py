"""Provisioning programs for the default layers."""

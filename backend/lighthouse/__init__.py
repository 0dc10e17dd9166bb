"""Lighthouse backend: usage metering and plan entitlements."""

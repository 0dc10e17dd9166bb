"""Billing domain — plan catalog and entitlement evaluation.

Everything here is pure: the catalog is built once at import time and the
evaluator only compares a snapshot against a plan config.
"""

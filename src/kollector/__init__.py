"""Kollector: a multi-tenant music release catalog."""

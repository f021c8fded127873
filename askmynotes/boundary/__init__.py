"""Boundary adapters: relational store and object storage."""

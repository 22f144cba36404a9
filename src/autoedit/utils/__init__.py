"""Shared helpers: process running, probing, I/O, logging."""

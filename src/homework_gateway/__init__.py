"""Homework chat gateway: validates, classifies and forwards chat requests to an LLM."""

__version__ = "0.1.0"

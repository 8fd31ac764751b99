"""Configuration, logging, errors and data models."""

"""
Integration tests for the image mail relay.

These tests drive the Lambda entry point end to end against moto S3 and a
fake email provider.
"""

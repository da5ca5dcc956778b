"""Thin boto3 wrappers around the object store calls the gateway makes."""

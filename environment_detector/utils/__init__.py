"""Failure-tolerant filesystem and process probes"""

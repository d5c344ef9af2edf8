"""
BoltView - inspector/editor for single-file B+Tree key-value databases

A small command-line tool for listing buckets, listing key-value pairs,
and inserting or deleting keys, each as one engine transaction.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"

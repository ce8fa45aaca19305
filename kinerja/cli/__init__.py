"""Kinerja command line interface."""

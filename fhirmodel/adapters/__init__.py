"""Adapters for fhirmodel: text codecs and document readers."""

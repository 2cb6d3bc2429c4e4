"""SOAP Scribe: browser recorder and API that turn a clinical encounter into a SOAP note."""

__version__ = "0.1.0"

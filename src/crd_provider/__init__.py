"""crd-provider: typed resource schemas synthesized from cluster CRDs."""

__version__ = "0.1.0"

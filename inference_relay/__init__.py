"""HTTP relay that submits signed inference calls to a Sui contract."""

__version__ = "0.1.0"

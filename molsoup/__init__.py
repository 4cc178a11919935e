"""molsoup — PDB/mmCIF parsing into an in-memory molecular model."""

__version__ = "0.1.0"

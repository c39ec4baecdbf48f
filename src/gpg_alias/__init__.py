"""gpg-alias: OpenPGP key aliases with trust-on-first-use anchoring."""

__version__ = "0.2.0"

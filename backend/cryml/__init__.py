"""
cryml - validation and parsing for the cryml YAML diagram dialect.

Three diagram kinds are supported: ERD, flow and sequence. Validation
(``cryml.validation``) and parsing (``cryml.parsers``) are independent
pipelines over the same YAML text.
"""

__version__ = "0.1.0"

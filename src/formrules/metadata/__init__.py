"""File-based field configuration for formrules."""

from formrules.metadata.loader import ConfigLoader, load_data_file
from formrules.metadata.validator import ConfigIssue, validate_config_file

__all__ = [
    "ConfigIssue",
    "ConfigLoader",
    "load_data_file",
    "validate_config_file",
]

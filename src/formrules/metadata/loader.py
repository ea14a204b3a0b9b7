"""Load field configurations and form data from files."""

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from formrules.engine import FormValidator
from formrules.types import ConfigurationError, FieldConfig

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Loads field configurations from a YAML document.

    Expected shape:

        fields:
          email:
            rules:
              - required
              - email
          password:
            rules:
              - required
              - name: password
                params: {minLength: 10}
    """

    def __init__(self, config_path: Path):
        self.config_path = Path(config_path)
        self.fields: dict[str, FieldConfig] = {}

    def load(self) -> dict[str, FieldConfig]:
        """Parse the configuration file.

        Raises:
            ConfigurationError: If the file is empty or structurally invalid
        """
        with self.config_path.open() as fh:
            data = yaml.safe_load(fh)

        if not data:
            raise ConfigurationError(f"Configuration file is empty: {self.config_path}")
        if not isinstance(data, dict) or not isinstance(data.get("fields"), dict):
            raise ConfigurationError(
                f"Configuration file must contain a 'fields' mapping: {self.config_path}"
            )

        fields: dict[str, FieldConfig] = {}
        for field_name, raw_config in data["fields"].items():
            try:
                fields[str(field_name)] = FieldConfig.from_value(raw_config)
            except ConfigurationError as e:
                raise ConfigurationError(f"Field '{field_name}': {e}") from e

        self.fields = fields
        logger.debug("Loaded %d field configuration(s) from %s", len(fields), self.config_path)
        return fields

    def load_into(self, validator: FormValidator) -> list[str]:
        """Load the file and configure every field on the validator.

        Returns:
            Names of the configured fields
        """
        fields = self.load()
        validator.configure_fields(fields)
        return list(fields.keys())


def load_data_file(data_path: Path) -> dict[str, Any]:
    """Load a form data snapshot from a JSON or YAML file."""
    data_path = Path(data_path)
    with data_path.open() as fh:
        if data_path.suffix.lower() == ".json":
            data = json.load(fh)
        else:
            data = yaml.safe_load(fh)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Form data must be a mapping of field name to value: {data_path}"
        )
    return data

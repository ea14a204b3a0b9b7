"""Field configuration store for formrules."""

from collections.abc import Mapping
from typing import Any

from formrules.types import ConfigurationError, FieldConfig


class FieldConfigStore:
    """Maps field names to their ordered rule configuration.

    Configurations are normalised through FieldConfig.from_value, so a
    malformed configuration fails here rather than during validation.
    """

    def __init__(self) -> None:
        self._configs: dict[str, FieldConfig] = {}

    def configure_field(self, field_name: str, config: FieldConfig | Mapping[str, Any]) -> FieldConfig:
        """Replace the configuration for a field."""
        if not isinstance(field_name, str) or not field_name:
            raise ConfigurationError("Field name must be a non-empty string")
        normalized = FieldConfig.from_value(config)
        self._configs[field_name] = normalized
        return normalized

    def configure_fields(self, configs: Mapping[str, FieldConfig | Mapping[str, Any]]) -> None:
        """Configure several fields at once."""
        if not isinstance(configs, Mapping):
            raise ConfigurationError(
                f"Field configurations must be a mapping of field name to config, "
                f"got {type(configs).__name__}"
            )
        for field_name, config in configs.items():
            self.configure_field(field_name, config)

    def reset_field(self, field_name: str) -> None:
        """Remove a field's configuration. The field becomes unconditionally valid."""
        self._configs.pop(field_name, None)

    def clear_all(self) -> None:
        self._configs.clear()

    def get(self, field_name: str) -> FieldConfig | None:
        return self._configs.get(field_name)

    def field_names(self) -> list[str]:
        """Configured field names, in configuration order."""
        return list(self._configs.keys())

    def __contains__(self, field_name: object) -> bool:
        return field_name in self._configs

    def __len__(self) -> int:
        return len(self._configs)

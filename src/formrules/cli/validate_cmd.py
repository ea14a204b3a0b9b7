"""Validation CLI commands — validate, rules, check-config."""

import json
from pathlib import Path

import click
import yaml

from formrules.engine import FormValidator
from formrules.metadata.loader import ConfigLoader, load_data_file
from formrules.metadata.validator import validate_config_file
from formrules.orchestrator import FieldOrchestrator, FormHooks, InMemoryForm
from formrules.rules.extended import register_extended_rules
from formrules.settings import Settings
from formrules.types import ConfigurationError, FormValidationResult


def _build_validator(extended: bool) -> FormValidator:
    validator = FormValidator()
    if extended:
        register_extended_rules(validator.registry)
    return validator


def _use_extended(ctx: click.Context, flag: bool) -> bool:
    settings = ctx.obj if isinstance(ctx.obj, Settings) else Settings.from_env()
    return flag or settings.extended_rules


_extended_option = click.option(
    "--extended",
    is_flag=True,
    default=False,
    help="Also register the extended business rules (sku, price, cpf, ...).",
)


@click.command()
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("data_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_extended_option
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON.")
@click.pass_context
def validate(ctx: click.Context, config_path: Path, data_path: Path, extended: bool, as_json: bool):
    """Validate a form data file (JSON/YAML) against a field configuration file."""
    validator = _build_validator(_use_extended(ctx, extended))

    try:
        ConfigLoader(config_path).load_into(validator)
        data = load_data_file(data_path)
    except (ConfigurationError, yaml.YAMLError, json.JSONDecodeError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    outcome: dict[str, FormValidationResult] = {}
    orchestrator = FieldOrchestrator(
        validator,
        hooks=FormHooks(on_form_invalid=lambda result: outcome.update(invalid=result)),
    )
    for field in InMemoryForm.from_mapping(data).inputs():
        orchestrator.add_field(field.name, field, validator.get_field_config(field.name))
    result = orchestrator.submit()

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, default=str))
        if not result.is_valid:
            raise SystemExit(1)
        return

    if "invalid" not in outcome:
        click.echo(
            click.style(
                f"Form is valid ({len(result.fields)} field(s) checked).", fg="green", bold=True
            )
        )
        return

    for error in result.errors:
        click.echo(click.style(f"  ✗ {error.field}: {error.message} [{error.rule}]", fg="red"))
    click.echo(
        click.style(
            f"\n{len(result.errors)} error(s) in {len(result.invalid_fields)} field(s)",
            fg="red",
            bold=True,
        )
    )
    raise SystemExit(1)


@click.command()
@_extended_option
@click.pass_context
def rules(ctx: click.Context, extended: bool):
    """List the available validation rules and their default messages."""
    validator = _build_validator(_use_extended(ctx, extended))
    for name in validator.get_available_rules():
        click.echo(f"  {name:<16} {validator.registry.get_message(name)}")


@click.command("check-config")
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_extended_option
@click.option("--strict", is_flag=True, default=False, help="Treat warnings as errors.")
@click.pass_context
def check_config(ctx: click.Context, config_path: Path, extended: bool, strict: bool):
    """Check a field configuration file against the JSON Schema."""
    validator = _build_validator(_use_extended(ctx, extended))
    issues = validate_config_file(config_path, registry=validator.registry, strict=strict)

    errors = [i for i in issues if i.severity == "error"]
    warnings = [i for i in issues if i.severity == "warning"]

    for issue in issues:
        colour = "red" if issue.severity == "error" else "yellow"
        click.echo(click.style(str(issue), fg=colour))

    if errors:
        click.echo(
            click.style(
                f"\n{len(errors)} error(s) found"
                + (f", {len(warnings)} warning(s)" if warnings else ""),
                fg="red",
                bold=True,
            )
        )
        raise SystemExit(1)

    if warnings:
        click.echo(click.style(f"{len(warnings)} warning(s) found.", fg="yellow"))

    click.echo(click.style("Configuration is valid.", fg="green", bold=True))

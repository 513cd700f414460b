"""
Preset configuration options.

Options are declarative: a preset lists them, the configuration UI renders
them, and ``resolve_options`` turns what the user entered into the values a
preset's factory receives.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence

from addonstreams.streams.constants import MediaType, ResourceType
from addonstreams.utils.urls import is_http_url

MIN_TIMEOUT = 1000
MAX_TIMEOUT = 60000


class OptionType(str, Enum):
    """Input types understood by the configuration UI."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    URL = "url"
    SELECT = "select"
    MULTI_SELECT = "multi-select"
    SOCIALS = "socials"  # informational only, never resolved


class PresetOptionError(Exception):
    """A user-supplied option value is missing or invalid."""

    def __init__(self, message: str, option_id: str):
        super().__init__(message)
        self.option_id = option_id


@dataclass(frozen=True)
class SelectChoice:
    value: str
    label: str


@dataclass(frozen=True)
class OptionConstraints:
    min: Optional[float] = None
    max: Optional[float] = None


@dataclass(frozen=True)
class SocialLink:
    id: str
    url: str


@dataclass(frozen=True)
class Option:
    """One user-configurable field of a preset."""

    id: str
    name: str
    description: str
    type: OptionType
    required: bool = False
    default: Any = None
    options: tuple[SelectChoice, ...] = ()
    constraints: Optional[OptionConstraints] = None
    socials: tuple[SocialLink, ...] = ()
    show_in_simple_mode: bool = True

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "type": self.type.value,
            "required": self.required,
        }
        if self.default is not None:
            data["default"] = self.default
        if self.options:
            data["options"] = [{"value": c.value, "label": c.label} for c in self.options]
        if self.constraints is not None:
            data["constraints"] = {"min": self.constraints.min, "max": self.constraints.max}
        if self.socials:
            data["socials"] = [{"id": s.id, "url": s.url} for s in self.socials]
        if not self.show_in_simple_mode:
            data["showInSimpleMode"] = False
        return data


def base_options(
    name: str,
    resources: Sequence[ResourceType],
    timeout: int,
) -> list[Option]:
    """The options every preset starts from."""
    return [
        Option(
            id="name",
            name="Name",
            description="What to call this addon",
            type=OptionType.STRING,
            required=True,
            default=name,
        ),
        Option(
            id="timeout",
            name="Timeout",
            description="The timeout for this addon in milliseconds",
            type=OptionType.NUMBER,
            required=True,
            default=timeout,
            constraints=OptionConstraints(min=MIN_TIMEOUT, max=MAX_TIMEOUT),
        ),
        Option(
            id="resources",
            name="Resources",
            description="Which resources to use from this addon",
            type=OptionType.MULTI_SELECT,
            required=True,
            default=[r.value for r in resources],
            options=tuple(SelectChoice(r.value, r.value.capitalize()) for r in resources),
            show_in_simple_mode=False,
        ),
        Option(
            id="url",
            name="URL",
            description="Override the URL used to access this addon",
            type=OptionType.URL,
            show_in_simple_mode=False,
        ),
        Option(
            id="mediaTypes",
            name="Media Types",
            description="Limit this addon to the selected media types. Leave empty to use it for all.",
            type=OptionType.MULTI_SELECT,
            default=[],
            options=tuple(SelectChoice(m.value, m.value.capitalize()) for m in MediaType),
            show_in_simple_mode=False,
        ),
    ]


def resolve_options(
    schema: Sequence[Option],
    user_options: dict[str, Any],
) -> dict[str, Any]:
    """
    Apply defaults and validate user options against a preset's schema.

    Keys not in the schema are passed through untouched.

    Raises:
        PresetOptionError: If a required option is missing or a value is invalid
    """
    resolved = dict(user_options)

    for option in schema:
        if option.type == OptionType.SOCIALS:
            continue

        value = user_options.get(option.id)
        if value is None or value == "":
            value = option.default

        if value is None:
            if option.required:
                raise PresetOptionError(f"{option.name} is required", option.id)
            resolved.pop(option.id, None)
            continue

        resolved[option.id] = _coerce(option, value)

    return resolved


def _coerce(option: Option, value: Any) -> Any:
    if option.type == OptionType.NUMBER:
        return _coerce_number(option, value)

    if option.type == OptionType.BOOLEAN:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ("true", "false"):
            return value.lower() == "true"
        raise PresetOptionError(f"{option.name} must be true or false", option.id)

    if option.type in (OptionType.STRING, OptionType.URL):
        if not isinstance(value, str):
            raise PresetOptionError(f"{option.name} must be text", option.id)
        value = value.strip()
        if option.type == OptionType.URL and not is_http_url(value):
            raise PresetOptionError(f"{option.name} must be an http(s) URL", option.id)
        return value

    choices = {c.value for c in option.options}

    if option.type == OptionType.SELECT:
        if value not in choices:
            raise PresetOptionError(f"{option.name}: unknown choice {value!r}", option.id)
        return value

    if option.type == OptionType.MULTI_SELECT:
        if not isinstance(value, (list, tuple)):
            raise PresetOptionError(f"{option.name} must be a list", option.id)
        unknown = [v for v in value if v not in choices]
        if unknown:
            raise PresetOptionError(f"{option.name}: unknown choices {unknown}", option.id)
        return list(value)

    return value


def _coerce_number(option: Option, value: Any) -> float | int:
    if isinstance(value, bool):
        raise PresetOptionError(f"{option.name} must be a number", option.id)

    if isinstance(value, str):
        try:
            value = float(value) if "." in value else int(value)
        except ValueError:
            raise PresetOptionError(f"{option.name} must be a number", option.id) from None

    if not isinstance(value, (int, float)):
        raise PresetOptionError(f"{option.name} must be a number", option.id)

    constraints = option.constraints
    if constraints is not None:
        if constraints.min is not None and value < constraints.min:
            raise PresetOptionError(f"{option.name} must be at least {constraints.min:g}", option.id)
        if constraints.max is not None and value > constraints.max:
            raise PresetOptionError(f"{option.name} must be at most {constraints.max:g}", option.id)

    return value

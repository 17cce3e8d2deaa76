"""Pydantic configuration models for request adapters."""

from pathlib import Path
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, Field, field_validator

from .headers import HeaderCollection
from .options import RequestOptions


class RequestDefaults(BaseModel):
    """Default request options applied to every request of an adapter."""

    method: Optional[str] = Field(None, description="HTTP method (defaults to GET)")
    headers: Optional[Any] = Field(
        None,
        description="Default headers: a mapping or a list of [name, value, options?] entries",
    )
    content_type: Optional[str] = Field(None, description="Default Content-Type header")
    body: Any = Field(None, description="Default request body")
    allowed_statuses: list[Union[int, Callable[[int], bool]]] = Field(
        default_factory=list,
        description="Extra status codes (or predicates) considered successful",
    )
    only_allowed_statuses: Optional[bool] = Field(
        None,
        description="Only treat allowed_statuses as successful, not every 2xx",
    )

    model_config = {"extra": "forbid"}

    @field_validator("method")
    @classmethod
    def upper_method(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v else v

    @field_validator("headers")
    @classmethod
    def validate_headers(cls, v: Any) -> Any:
        """Reject header input the header collection cannot normalize."""
        if v is None:
            return v
        try:
            HeaderCollection(v)
        except TypeError as err:
            raise ValueError(str(err)) from err
        return v

    def to_options(self) -> RequestOptions:
        """Convert to a RequestOptions derived from the default baseline."""
        return RequestOptions.default.extend(
            method=self.method,
            headers=self.headers,
            body=self.body,
            content_type=self.content_type,
            allowed_statuses=self.allowed_statuses,
            only_allowed_statuses=self.only_allowed_statuses,
        )


class AdapterConfig(BaseModel):
    """
    Configuration for a request adapter.

    Example:
        config = AdapterConfig(
            base_url="https://api.example.com/",
            defaults=RequestDefaults(headers={"Accept": "application/json"}),
        )

    YAML format:
        base_url: https://api.example.com/
        defaults:
          headers:
            Accept: application/json
          allowed_statuses: [404]
    """

    base_url: Optional[str] = Field(None, description="Base URL routes are resolved against")
    defaults: RequestDefaults = Field(default_factory=RequestDefaults)

    model_config = {"extra": "forbid"}

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "AdapterConfig":
        """Load config from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "AdapterConfig":
        """Load config from YAML file."""
        return cls.from_yaml(Path(path).read_text())

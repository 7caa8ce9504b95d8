"""
RestTemplate settings
Type-safe configuration that can be applied to a RestTemplateBuilder
"""

from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

if TYPE_CHECKING:
    from rest_template.client.builder import RestTemplateBuilder


class SettingsDefaults:
    """Default configuration values"""
    DETECT_REQUEST_FACTORY = True
    MAX_TIMEOUT = 300000


# Environment variable mapping
ENV_VAR_MAPPING = {
    "REST_TEMPLATE_ROOT_URI": "root_uri",
    "REST_TEMPLATE_CONNECT_TIMEOUT": "connect_timeout",
    "REST_TEMPLATE_READ_TIMEOUT": "read_timeout",
    "REST_TEMPLATE_DETECT_REQUEST_FACTORY": "detect_request_factory",
    "REST_TEMPLATE_BASIC_AUTH_USERNAME": "basic_auth_username",
    "REST_TEMPLATE_BASIC_AUTH_PASSWORD": "basic_auth_password",
}


class RestTemplateSettings(BaseModel):
    """
    Settings for building RestTemplate instances

    Every field is optional; unset fields leave the builder untouched.
    """

    root_uri: Optional[str] = Field(
        default=None,
        description="Root URI prefixed to templates starting with '/'"
    )
    connect_timeout: Optional[int] = Field(
        default=None,
        description="Connect timeout in milliseconds",
        ge=0,
        le=SettingsDefaults.MAX_TIMEOUT
    )
    read_timeout: Optional[int] = Field(
        default=None,
        description="Read timeout in milliseconds",
        ge=0,
        le=SettingsDefaults.MAX_TIMEOUT
    )
    detect_request_factory: bool = Field(
        default=SettingsDefaults.DETECT_REQUEST_FACTORY,
        description="Detect the richest available transport"
    )
    basic_auth_username: Optional[str] = Field(
        default=None,
        description="Username for HTTP Basic authorization"
    )
    basic_auth_password: Optional[str] = Field(
        default=None,
        description="Password for HTTP Basic authorization"
    )

    # Credentials are kept verbatim; only root_uri is stripped
    model_config = {
        "validate_assignment": True,
    }

    @field_validator("root_uri")
    @classmethod
    def validate_root_uri(cls, v: Optional[str]) -> Optional[str]:
        """Validate root_uri is an HTTP/HTTPS URL"""
        if v is not None:
            v = v.strip()
        if v:
            if not v.startswith(("http://", "https://")):
                raise ValueError("root_uri must be a valid HTTP/HTTPS URL")
        return v or None

    @model_validator(mode="after")
    def validate_basic_auth(self) -> "RestTemplateSettings":
        """Require both basic auth credentials or neither"""
        has_username = self.basic_auth_username is not None
        has_password = self.basic_auth_password is not None
        if has_username != has_password:
            raise ValueError(
                "basic_auth_username and basic_auth_password must be set together"
            )
        return self

    def apply_to(self, builder: "RestTemplateBuilder") -> "RestTemplateBuilder":
        """
        Derive a builder carrying these settings

        Args:
            builder: Builder to start from

        Returns:
            New builder; ``builder`` itself is unchanged
        """
        builder = builder.detect_request_factory(self.detect_request_factory)
        if self.root_uri is not None:
            builder = builder.root_uri(self.root_uri)
        if self.connect_timeout is not None:
            builder = builder.set_connect_timeout(self.connect_timeout)
        if self.read_timeout is not None:
            builder = builder.set_read_timeout(self.read_timeout)
        if self.basic_auth_username is not None:
            builder = builder.basic_authorization(
                self.basic_auth_username, self.basic_auth_password
            )
        return builder

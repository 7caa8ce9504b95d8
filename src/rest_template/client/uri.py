"""
URI template expansion

A UriTemplateHandler turns a template such as ``/users/{id}`` plus
variables into the URI a request is sent to.
"""

import re
from typing import Any, Mapping, Optional, Protocol, runtime_checkable
from urllib.parse import quote

from rest_template.exceptions import ValidationError


_VARIABLE_PATTERN = re.compile(r"\{([^{}/]+)\}")


@runtime_checkable
class UriTemplateHandler(Protocol):
    """Expands URI templates"""

    def expand(
        self,
        template: str,
        *uri_args: Any,
        uri_variables: Optional[Mapping[str, Any]] = None,
    ) -> str:
        ...


class DefaultUriTemplateHandler:
    """
    Expands ``{name}`` placeholders

    Placeholders are filled from positional arguments in order of
    appearance, or by name from the ``uri_variables`` mapping. Values are
    percent-encoded unless ``encode`` is False. A relative template is
    resolved against ``base_url`` when one is set.
    """

    def __init__(self, base_url: Optional[str] = None, encode: bool = True) -> None:
        self.base_url = base_url
        self.encode = encode

    def expand(
        self,
        template: str,
        *uri_args: Any,
        uri_variables: Optional[Mapping[str, Any]] = None,
    ) -> str:
        uri = self._expand(template, uri_args, uri_variables or {})
        if self.base_url and not re.match(r"^[a-zA-Z][a-zA-Z0-9+.-]*://", uri):
            uri = self.base_url.rstrip("/") + "/" + uri.lstrip("/")
        return uri

    def _expand(
        self, template: str, args: tuple, variables: Mapping[str, Any]
    ) -> str:
        positional = iter(args)

        def replace(match: "re.Match[str]") -> str:
            name = match.group(1).strip()
            if args:
                try:
                    value = next(positional)
                except StopIteration:
                    raise ValidationError(
                        f"Not enough variable values available to expand '{name}'",
                        field=name,
                    ) from None
            elif name in variables:
                value = variables[name]
            else:
                raise ValidationError(
                    f"Map has no value for '{name}'", field=name
                )
            text = "" if value is None else str(value)
            return quote(text, safe="") if self.encode else text

        return _VARIABLE_PATTERN.sub(replace, template)


class RootUriTemplateHandler:
    """
    Prefixes templates starting with ``/`` with a root URI

    Expansion of the prefixed template is delegated to the wrapped
    handler, so ``root_uri="http://example.com"`` turns ``/hello`` into
    ``http://example.com/hello`` before the wrapped handler sees it.
    """

    def __init__(
        self, root_uri: str, handler: Optional[UriTemplateHandler] = None
    ) -> None:
        if root_uri is None:
            raise ValidationError("RootUri must not be null", field="root_uri")
        self.root_uri = root_uri
        self.handler = handler if handler is not None else DefaultUriTemplateHandler()

    def expand(
        self,
        template: str,
        *uri_args: Any,
        uri_variables: Optional[Mapping[str, Any]] = None,
    ) -> str:
        return self.handler.expand(
            self.apply(template), *uri_args, uri_variables=uri_variables
        )

    def apply(self, template: str) -> str:
        """Prefix ``template`` with the root URI when it is a root-relative path"""
        if template.startswith("/"):
            return self.root_uri.rstrip("/") + template
        return template

    @classmethod
    def add_to(cls, rest_template: Any, root_uri: str) -> "RootUriTemplateHandler":
        """
        Wrap the URI handler of ``rest_template`` with a root URI handler

        An existing RootUriTemplateHandler is replaced rather than nested,
        so applying a root URI twice keeps a single prefix.
        """
        if rest_template is None:
            raise ValidationError(
                "RestTemplate must not be null", field="rest_template"
            )
        current = rest_template.uri_template_handler
        if isinstance(current, RootUriTemplateHandler):
            current = current.handler
        handler = cls(root_uri, current)
        rest_template.uri_template_handler = handler
        return handler

"""
RestTemplateBuilder Examples
Demonstrates various ways to build and configure RestTemplate instances
"""

import logging

from rest_template import (
    RestTemplate,
    RestTemplateBuilder,
    SettingsLoader,
    SimpleClientHttpRequestFactory,
)


# =============================================================================
# Example 1: Fluent configuration
# =============================================================================

def fluent_builder_example() -> RestTemplate:
    """Build a template for a JSON API behind basic auth"""
    builder = (
        RestTemplateBuilder()
        .root_uri("https://api.example.com")
        .basic_authorization("api-user", "api-secret")
        .set_connect_timeout(2000)
        .set_read_timeout(10000)
    )

    return builder.build()


# =============================================================================
# Example 2: Shared base builder with per-service customization
# =============================================================================

def shared_builder_example() -> tuple:
    """Derive independent builders from one shared base"""

    def add_user_agent(template: RestTemplate) -> None:
        template.interceptors.append(UserAgentInterceptor("example-app/1.0"))

    base = RestTemplateBuilder(add_user_agent).set_read_timeout(5000)

    # Deriving never changes ``base``
    billing = base.root_uri("https://billing.example.com").build()
    search = base.root_uri("https://search.example.com").detect_request_factory(False).build()

    return billing, search


class UserAgentInterceptor:
    """Sets a User-Agent header on every request"""

    def __init__(self, user_agent: str) -> None:
        self.user_agent = user_agent

    def intercept(self, request, body, execution):
        request.headers["User-Agent"] = self.user_agent
        return execution.execute(request, body)


# =============================================================================
# Example 3: Settings from environment variables / JSON file
# =============================================================================

def settings_example() -> RestTemplate:
    """
    Load settings from REST_TEMPLATE_* environment variables

    e.g. REST_TEMPLATE_ROOT_URI=https://api.example.com
         REST_TEMPLATE_READ_TIMEOUT=5000
    """
    settings = SettingsLoader().load()
    return settings.apply_to(RestTemplateBuilder()).build()


# =============================================================================
# Example 4: Configure an existing template
# =============================================================================

def configure_existing_example() -> RestTemplate:
    """Apply builder configuration to a template created elsewhere"""
    template = RestTemplate()
    RestTemplateBuilder().request_factory(SimpleClientHttpRequestFactory).configure(template)
    return template


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)

    template = fluent_builder_example()
    print(f"Request factory: {type(template.request_factory).__name__}")
    print(f"Example URI: {template.uri_template_handler.expand('/users/{id}', 42)}")

    billing, search = shared_builder_example()
    print(f"Billing transport: {type(billing.request_factory).__name__}")
    print(f"Search transport: {type(search.request_factory).__name__}")

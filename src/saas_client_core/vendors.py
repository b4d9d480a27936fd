"""Ready-made configurations for the vendors with generated clients."""

from dataclasses import replace

from saas_client_core.config import AuthScheme, ClientConfig, EnvVars

COMMONROOM = ClientConfig(
    name="commonroom",
    base_url="https://api.commonroom.io/community/v1",
    env=EnvVars.for_prefix("COMMONROOM"),
)

DISCOURSE = ClientConfig(
    name="discourse",
    base_url="https://discourse.example.com",
    auth_scheme=AuthScheme.HEADER,
    auth_header="Api-Key",
    env=EnvVars.for_prefix("DISCOURSE"),
)

FRONT = ClientConfig(
    name="front",
    base_url="https://api2.frontapp.com",
    env=EnvVars.for_prefix("FRONT"),
)

GUSTO = ClientConfig(
    name="gusto",
    base_url="https://api.gusto.com",
    token_endpoint="https://api.gusto.com/oauth/token",
    user_consent_endpoint="https://api.gusto.com/oauth/authorize",
    default_headers={"X-Gusto-API-Version": "v1.0.0"},
    env=EnvVars.for_prefix("GUSTO"),
)

HUBSPOT_CONTACTS = ClientConfig(
    name="hubspot-contacts",
    base_url="https://api.hubspot.com",
    env=EnvVars.for_prefix("HUBSPOT_CONTACTS"),
)

HUBSPOT_TICKETS = ClientConfig(
    name="hubspot-tickets",
    base_url="https://api.hubspot.com",
    env=EnvVars.for_prefix("HUBSPOT_TICKETS"),
)

HUBSPOT_USERS = ClientConfig(
    name="hubspot-users",
    base_url="https://api.hubspot.com",
    env=EnvVars.for_prefix("HUBSPOT_USERS"),
)

PAGERDUTY = ClientConfig(
    name="pagerduty",
    base_url="https://api.pagerduty.com",
    env=EnvVars.for_prefix("PAGERDUTY"),
)

RAMP = ClientConfig(
    name="ramp",
    base_url="https://api.ramp.com",
    token_endpoint="https://api.ramp.com/v1/public/customer/token",
    user_consent_endpoint="https://app.ramp.com/v1/authorize",
    env=EnvVars.for_prefix("RAMP"),
)

REMOTE = ClientConfig(
    name="remote",
    base_url="https://gateway.remote.com",
    env=EnvVars.for_prefix("REMOTE"),
)

RIPPLING = ClientConfig(
    name="rippling",
    base_url="https://rest.ripplingapis.com",
    env=EnvVars.for_prefix("RIPPLING"),
)

RIPPLING_BASE = ClientConfig(
    name="rippling-base",
    base_url="https://api.rippling.com",
    env=EnvVars.for_prefix("RIPPLING_BASE"),
)

TWILIO = ClientConfig(
    name="twilio",
    base_url="https://api.twilio.com",
    auth_scheme=AuthScheme.BASIC,
    env=EnvVars.for_prefix("TWILIO"),
)

ZENDESK = ClientConfig(
    name="zendesk",
    base_url="https://api.getbase.com",
    env=replace(EnvVars.for_prefix("ZENDESK"), api_key="ZENDESK_TOKEN"),
)

VENDORS: dict[str, ClientConfig] = {
    config.name: config
    for config in (
        COMMONROOM,
        DISCOURSE,
        FRONT,
        GUSTO,
        HUBSPOT_CONTACTS,
        HUBSPOT_TICKETS,
        HUBSPOT_USERS,
        PAGERDUTY,
        RAMP,
        REMOTE,
        RIPPLING,
        RIPPLING_BASE,
        TWILIO,
        ZENDESK,
    )
}

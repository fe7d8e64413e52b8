"""Environment schema of the scaffolded SaaS stack.

Backend services validate ``SAAS_ENV.server`` (through ``SAAS_ENV``, which
covers both surfaces); the web app validates ``SAAS_ENV.client`` only, so no
server secret passes through the code path that feeds the browser bundle.
"""

from __future__ import annotations

from ._fields import Derived, Field, Kind, MinLength, Prefix, Range, UrlScheme
from ._schema import EnvSchema, is_set
from ._surfaces import DualSchema

NODE_ENVS = ("development", "test", "production")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
PUBLIC_PREFIX = "NEXT_PUBLIC_"

SERVER = EnvSchema(
    [
        # Database
        Field(
            "DATABASE_URL",
            Kind.URL,
            constraints=(UrlScheme("postgres", "postgresql"),),
            description="Pooled Postgres connection string",
        ),
        Field(
            "DIRECT_URL",
            Kind.URL,
            required=False,
            constraints=(UrlScheme("postgres", "postgresql"),),
            description="Direct (non-pooled) connection used for migrations",
        ),
        # Supabase
        Field("SUPABASE_URL", Kind.URL, description="Supabase API URL"),
        Field("SUPABASE_ANON_KEY", secret=True, description="Get from: supabase status"),
        Field("SUPABASE_SERVICE_ROLE_KEY", secret=True, description="Get from: supabase status"),
        # Auth
        Field(
            "JWT_SECRET",
            constraints=(MinLength(32),),
            secret=True,
            description="Signing key for session tokens, at least 32 characters",
        ),
        # App
        Field("NODE_ENV", Kind.ENUM, required=False, default="development", choices=NODE_ENVS),
        Field("PORT", Kind.INTEGER, required=False, default=8000, constraints=(Range(1, 65535),)),
        Field("LOG_LEVEL", Kind.ENUM, required=False, default="INFO", choices=LOG_LEVELS),
        # Cache
        Field(
            "REDIS_URL",
            Kind.URL,
            required=False,
            constraints=(UrlScheme("redis", "rediss"),),
            description="Redis connection string; caching stays off without it",
        ),
        Field("ENABLE_CACHE", Kind.BOOLEAN, required=False, default=False, requires="REDIS_URL"),
        # Payments
        Field(
            "STRIPE_SECRET_KEY",
            required=False,
            constraints=(Prefix("sk_"),),
            secret=True,
            description="Stripe secret key (sk_test_... or sk_live_...)",
        ),
        Field(
            "STRIPE_WEBHOOK_SECRET",
            required=False,
            constraints=(Prefix("whsec_"),),
            secret=True,
            description="Printed by: stripe listen --forward-to ...",
        ),
        # Email
        Field(
            "SENDGRID_API_KEY",
            required=False,
            constraints=(Prefix("SG."),),
            secret=True,
        ),
        Field("SENDGRID_FROM_EMAIL", required=False, default="noreply@example.com"),
    ],
    derived=[
        Derived("is_production", lambda v: v["NODE_ENV"] == "production"),
        Derived("is_development", lambda v: v["NODE_ENV"] == "development"),
        Derived("is_test", lambda v: v["NODE_ENV"] == "test"),
        Derived("payments_enabled", lambda v: is_set(v, "STRIPE_SECRET_KEY")),
        Derived("email_enabled", lambda v: is_set(v, "SENDGRID_API_KEY")),
    ],
    name="Server",
)

CLIENT = EnvSchema(
    [
        Field("NEXT_PUBLIC_SUPABASE_URL", Kind.URL),
        Field("NEXT_PUBLIC_SUPABASE_ANON_KEY"),
        Field(
            "NEXT_PUBLIC_APP_URL",
            Kind.URL,
            required=False,
            default="http://localhost:3000",
            description="Public base URL of the web app",
        ),
    ],
    name="Client",
)

SAAS_ENV = DualSchema(client=CLIENT, server=SERVER, client_prefix=PUBLIC_PREFIX, name="SaaS")

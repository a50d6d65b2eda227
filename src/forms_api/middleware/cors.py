"""CORS middleware configuration."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


def configure_cors(
    app: FastAPI, allowed_origins: list[str], application_name: str
) -> None:
    """Add CORS middleware with specified allowed origins.

    Browsers only let scripts read the Location and entity alert headers
    when they are listed as exposed.

    Args:
        app: FastAPI application instance.
        allowed_origins: List of allowed origin URLs.
        application_name: Prefix of the alert headers to expose.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[
            "Location",
            "X-Request-ID",
            f"X-{application_name}-alert",
            f"X-{application_name}-error",
            f"X-{application_name}-params",
        ],
    )

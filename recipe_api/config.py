import importlib
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, List, Optional

import yaml

DEFAULT_DATABASE_URL = "sqlite:///./recipes.db"


@dataclass
class Route:
    """
    Represents a route in the service.
    """

    method: str
    path: str
    request_model: Optional[Any]
    response_model: Optional[Any]
    handler: str
    description: Optional[str]
    tags: List[str]
    status_code: int = 200
    errors: List[int] = field(default_factory=list)


@dataclass
class StoreSettings:
    """
    Selects the recipe store backend and its whitespace policy.
    """

    backend: str = "orm"
    trim_whitespace: bool = True


@dataclass
class CorsSettings:
    origins: List[str] = field(default_factory=lambda: ["*"])
    allow_credentials: bool = False


@dataclass
class Service:
    """
    Represents a service with its configuration, including routes and database.
    """

    name: str
    version: str
    title: str
    db: str
    store: StoreSettings
    routes: List[Route]


@dataclass
class Config:
    """
    Represents the entire configuration of the application, including all services.
    """

    urlPrefix: str
    title: str
    version: str
    description: str
    logLevel: str
    cors: CorsSettings
    services: Dict[str, Service]


def load_model(ref: Optional[str]):
    """
    Loads a model class from a string reference.
    Handles optional `List` types by checking for `[]` suffix.
    """
    if not ref:
        return None

    is_list = ref.endswith("[]")
    if is_list:
        ref = ref[:-2]

    module_name, class_name = ref.rsplit(".", 1)
    module = importlib.import_module(module_name)
    cls = getattr(module, class_name)

    if is_list:
        return List[cls]

    return cls


def normalize_database_url(url: str) -> str:
    """
    Hosted Postgres providers hand out `postgres://` URLs, which SQLAlchemy
    no longer accepts as a dialect name.
    """
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


def parse_route(route_data: dict) -> Route:
    """
    Parses a dictionary of route configurations into a Route object.
    """
    return Route(
        method=route_data["method"],
        path=route_data["path"],
        request_model=load_model(route_data.get("request_model")),
        response_model=load_model(route_data.get("response_model")),
        handler=route_data["handler"],
        description=route_data.get("description"),
        tags=route_data.get("tags", []),
        status_code=route_data.get("status_code", 200),
        errors=route_data.get("errors", []),
    )


def parse_store(store_data: Optional[dict]) -> StoreSettings:
    """
    Parses the store section of a service. Backend names are checked by
    the store registry when the application is built.
    """
    store_data = store_data or {}
    return StoreSettings(
        backend=store_data.get("backend", "orm"),
        trim_whitespace=store_data.get("trimWhitespace", True),
    )


def parse_service(service_data: dict) -> Service:
    """
    Parses a dictionary of service configurations into a Service object.
    DATABASE_URL takes precedence over the configured connection string.
    """
    db = os.getenv("DATABASE_URL") or service_data.get("db") or DEFAULT_DATABASE_URL
    return Service(
        name=service_data["name"],
        title=service_data["title"],
        version=service_data["version"],
        db=normalize_database_url(db),
        store=parse_store(service_data.get("store")),
        routes=[parse_route(route) for route in service_data["routes"]],
    )


def get_config_path() -> str:
    return os.getenv("RECIPE_API_CONFIG") or os.path.join(
        os.path.dirname(__file__), "config.yaml"
    )


@lru_cache()
def get_config() -> Config:
    """
    Loads and parses the entire application configuration from the config.yaml file.
    """
    with open(get_config_path(), "r") as f:
        raw_config = yaml.safe_load(f)

    services = {
        name: parse_service({"name": name, **data})
        for name, data in raw_config["services"].items()
    }

    cors = raw_config.get("cors") or {}

    return Config(
        urlPrefix=raw_config.get("urlPrefix", ""),
        title=raw_config["title"],
        version=raw_config["version"],
        description=raw_config.get("description", ""),
        logLevel=os.getenv("LOG_LEVEL") or raw_config.get("logLevel", "INFO"),
        cors=CorsSettings(
            origins=cors.get("origins", ["*"]),
            allow_credentials=cors.get("allowCredentials", False),
        ),
        services=services,
    )


def get_config_for_service(name: str) -> Service:
    """
    Retrieves the configuration for a specific service by its name.
    """
    svc = get_config().services.get(name)
    if svc:
        return svc
    raise ValueError(f"Service with name {name} not found.")

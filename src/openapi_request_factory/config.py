"""Registry of the OpenAPI documents requests are built against."""

import os
from pathlib import Path

from pydantic import BaseModel

from openapi_request_factory.errors import ConfigurationError
from openapi_request_factory.parser.openapi import load_document

ROOT_ENV_VAR = "OPENAPI_ROOT"
DOCUMENT_SUFFIXES = (".yaml", ".yml", ".json")


class Config(BaseModel):
    """Named OpenAPI documents, keyed by their path relative to the root."""

    openapi_root: Path | None = None
    openapi_specs: dict[str, dict] = {}

    @classmethod
    def from_root(cls, root: Path) -> "Config":
        """Load every document below ``root``."""
        root = Path(root)
        if not root.is_dir():
            raise ConfigurationError(f"openapi_root '{root}' is not a directory")

        specs = {}
        for path in sorted(root.rglob("*")):
            if path.is_file() and path.suffix in DOCUMENT_SUFFIXES:
                specs[path.relative_to(root).as_posix()] = load_document(path)
        return cls(openapi_root=root, openapi_specs=specs)

    @classmethod
    def from_env(cls) -> "Config":
        root = os.getenv(ROOT_ENV_VAR)
        if not root:
            raise ConfigurationError(f"No openapi_root provided, set {ROOT_ENV_VAR}")
        return cls.from_root(Path(root))

    def get_openapi_spec(self, name: str | None = None) -> dict:
        """Return the named document, or the first one when no name is given."""
        if not self.openapi_specs:
            raise ConfigurationError("No openapi_specs defined")
        if name is None:
            return next(iter(self.openapi_specs.values()))
        if name not in self.openapi_specs:
            raise ConfigurationError(f"Unknown openapi_spec '{name}'")
        return self.openapi_specs[name]

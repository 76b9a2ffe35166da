"""Loading of the two input documents into their pydantic models."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from src.shared.errors import DataLoadError
from src.shared.models.flags import FlagDocument
from src.shared.models.scenarios import ScenarioLibrary

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_YAML_SUFFIXES = {".yaml", ".yml"}


def read_raw_document(path: Path | str) -> Any:
    """Parse a JSON (or YAML, by suffix) document from disk.

    Raises:
        DataLoadError: If the file is missing, unreadable or unparseable.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DataLoadError(path, exc.strerror or str(exc)) from exc

    try:
        if path.suffix.lower() in _YAML_SUFFIXES:
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DataLoadError(path, str(exc)) from exc


def load_document(path: Path | str, model: type[ModelT]) -> ModelT:
    """Read *path* and validate it into *model*.

    Raises:
        DataLoadError: On any read, parse or validation failure.
    """
    raw = read_raw_document(path)
    if not isinstance(raw, dict):
        raise DataLoadError(path, "top-level value must be an object")
    try:
        document = model.model_validate(raw)
    except ValidationError as exc:
        raise DataLoadError(path, str(exc)) from exc
    logger.debug("Loaded %s from %s", model.__name__, path)
    return document


def load_flag_document(path: Path | str) -> FlagDocument:
    return load_document(path, FlagDocument)


def load_scenario_library(path: Path | str) -> ScenarioLibrary:
    return load_document(path, ScenarioLibrary)

"""
Deserialize JSON response bodies into caller-supplied types with pydantic.

Before validation the decoded body is walked alongside the target's declared
fields (models, dataclasses, TypedDicts, and the containers/Optionals holding
them, at any depth). Strict mode fails on any key the target does not
declare; lenient mode drops such keys, so nested models that forbid extras
still accept the body. Validation itself always runs against the caller's own
type, so results are plain instances of it.
"""

import dataclasses
import json
import logging
from collections.abc import Mapping, Sequence, Set
from functools import lru_cache
from types import UnionType
from typing import Annotated, Any, Optional, Union, get_args, get_origin, get_type_hints, is_typeddict

from pydantic import AliasChoices, AliasPath, BaseModel, RootModel, TypeAdapter, ValidationError

from restcall.exceptions import PayloadFormatError
from restcall.models import is_blank

logger = logging.getLogger(__name__)


def _alias_keys(alias: Any) -> list[str]:
    if isinstance(alias, str):
        return [alias]
    if isinstance(alias, AliasPath):
        return [alias.path[0]] if alias.path and isinstance(alias.path[0], str) else []
    if isinstance(alias, AliasChoices):
        return [key for choice in alias.choices for key in _alias_keys(choice)]
    return []


def _pydantic_keys(field_infos: Mapping[str, Any]) -> dict[str, Any]:
    keys = {}
    for name, info in field_infos.items():
        for key in [name, *_alias_keys(info.alias), *_alias_keys(info.validation_alias)]:
            keys[key] = info.annotation
    return keys


def _type_hints(cls: Any) -> dict[str, Any]:
    try:
        return get_type_hints(cls)
    except (NameError, TypeError):
        # unresolvable forward refs; keys are still known, nested types are not
        return {name: Any for name in getattr(cls, "__annotations__", {})}


def _declared_keys(tp: Any) -> Optional[dict[str, Any]]:
    """Map each JSON key `tp` accepts to its annotation; None if `tp` is not an object shape."""
    if isinstance(tp, type) and issubclass(tp, BaseModel):
        return _pydantic_keys(tp.model_fields)
    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        infos = getattr(tp, "__pydantic_fields__", None)
        if infos:
            return _pydantic_keys(infos)
        hints = _type_hints(tp)
        return {f.name: hints.get(f.name, Any) for f in dataclasses.fields(tp) if f.init}
    if is_typeddict(tp):
        return _type_hints(tp)
    return None


def _reconcile(data: Any, tp: Any, path: str, unknown: list[str]) -> Any:
    """Return `data` with undeclared object keys removed, recording each one's path in `unknown`."""
    origin = get_origin(tp)
    if origin is Annotated:
        return _reconcile(data, get_args(tp)[0], path, unknown)
    if origin is Union or origin is UnionType:
        members = [arg for arg in get_args(tp) if arg is not type(None)]
        # several candidate shapes: leave it to the members' own config
        return _reconcile(data, members[0], path, unknown) if len(members) == 1 else data
    if origin is not None:
        args = get_args(tp)
        if not args or not isinstance(origin, type):
            return data
        if isinstance(data, list) and issubclass(origin, (Sequence, Set)):
            if origin is tuple and not (len(args) == 2 and args[1] is Ellipsis):
                return [
                    _reconcile(item, args[i], f"{path}[{i}]", unknown) if i < len(args) else item
                    for i, item in enumerate(data)
                ]
            return [_reconcile(item, args[0], f"{path}[{i}]", unknown) for i, item in enumerate(data)]
        if isinstance(data, dict) and issubclass(origin, Mapping) and len(args) == 2:
            return {k: _reconcile(v, args[1], f"{path}.{k}" if path else k, unknown) for k, v in data.items()}
        return data
    if isinstance(tp, type) and issubclass(tp, RootModel):
        return _reconcile(data, tp.model_fields["root"].annotation, path, unknown)

    keys = _declared_keys(tp)
    if keys is None or not isinstance(data, dict):
        return data
    kept = {}
    for key, value in data.items():
        where = f"{path}.{key}" if path else key
        if key in keys:
            kept[key] = _reconcile(value, keys[key], where, unknown)
        else:
            unknown.append(where)
    return kept


@lru_cache(maxsize=256)
def _cached_adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


def _adapter(target: Any) -> TypeAdapter:
    try:
        hash(target)
    except TypeError:
        return TypeAdapter(target)
    return _cached_adapter(target)


def parse_response(body: Optional[str], target: Any, strict: bool = False) -> Any:
    """
    Parse `body` as JSON into `target`.
    Raises PayloadFormatError if the body is blank or does not fit the target.
    """
    if is_blank(body):
        raise PayloadFormatError("Response body is empty")
    try:
        data = json.loads(body)
    except ValueError as e:
        raise PayloadFormatError(f"Invalid response body structure: {e}") from e

    unknown: list[str] = []
    reconciled = _reconcile(data, target, "", unknown)
    if unknown:
        logger.debug("Fields not declared on %r: %s (strict=%s)", target, unknown, strict)
        if strict:
            raise PayloadFormatError(
                f"Invalid response body structure: extra fields not permitted: {', '.join(unknown)}"
            )

    adapter = _adapter(target)
    try:
        if unknown:
            return adapter.validate_json(json.dumps(reconciled))
        return adapter.validate_json(body)
    except ValidationError as e:
        logger.debug("Response body does not fit %r (strict=%s): %s", target, strict, e)
        raise PayloadFormatError(f"Invalid response body structure: {e}") from e

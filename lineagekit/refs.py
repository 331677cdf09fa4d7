"""Reference paths, path-template URIs and small lookup helpers."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from urllib.parse import quote_plus

from lineagekit.naming import schema_name_to_type_name

_PATH_PARAM_RE = re.compile(r"\{[.;?]?([^{}*]+)\*?\}")


def ref_path_to_obj_name(ref_path: str) -> str:
    """Return the last slash-separated element of a ``$ref`` unchanged."""
    return ref_path.split("/")[-1]


def _find_schema_name(ref_path: str, schema_names: Mapping[str, str] | None) -> str:
    """Look up a locally renamed type for a ``#/components/<kind>/<name>`` ref."""
    if not schema_names:
        return ""
    elements = ref_path.split("/")
    if len(elements) != 4 or elements[0] != "#" or elements[1] != "components":
        return ""
    return schema_names.get(ref_path, "")


def _ref_to_go_type(
    ref_path: str,
    local: bool,
    import_mapping: Mapping[str, str],
    schema_names: Mapping[str, str] | None,
) -> str:
    if not ref_path:
        raise ValueError("empty reference")
    if ref_path.startswith("#"):
        parts = ref_path.split("/")
        depth = len(parts)
        allowed = (4,) if local else (4, 2)
        if depth not in allowed:
            raise ValueError(
                f"unexpected reference depth: {depth} for ref: {ref_path} "
                f"local: {str(local).lower()}"
            )
        name = _find_schema_name(ref_path, schema_names)
        if name:
            return name
        return schema_name_to_type_name(parts[-1])

    parts = ref_path.split("#")
    if len(parts) != 2:
        raise ValueError(f"unsupported reference: {ref_path}")
    remote, flat = parts
    if remote not in import_mapping:
        raise ValueError(
            f"unrecognized external reference '{remote}'; please provide the known "
            "import for this reference using option --import-mapping"
        )
    go_type = _ref_to_go_type("#" + flat, False, import_mapping, schema_names)
    return f"{import_mapping[remote]}.{go_type}"


def ref_path_to_go_type(
    ref_path: str,
    import_mapping: Mapping[str, str] | None = None,
    schema_names: Mapping[str, str] | None = None,
) -> str:
    """Convert a ``$ref`` value into a Go type name.

    ``import_mapping`` maps remote documents to the package name used for them;
    ``schema_names`` maps local ref paths to type names they were renamed to.
    Raises ValueError for malformed, too deep or unmapped references.
    """
    return _ref_to_go_type(ref_path, True, import_mapping or {}, schema_names)


def is_whole_document_reference(ref: str) -> bool:
    """Report whether a ``$ref`` points at a whole document (has no ``#``)."""
    return bool(ref) and "#" not in ref


def is_go_type_reference(ref: str) -> bool:
    """Report whether a ``$ref`` can be turned into a Go type."""
    return bool(ref) and not is_whole_document_reference(ref)


def swagger_uri_to_echo_uri(uri: str) -> str:
    """Replace path parameters with ``:param``."""
    return _PATH_PARAM_RE.sub(r":\1", uri)


def swagger_uri_to_fiber_uri(uri: str) -> str:
    """Replace path parameters with ``:param``."""
    return _PATH_PARAM_RE.sub(r":\1", uri)


def swagger_uri_to_chi_uri(uri: str) -> str:
    """Replace path parameters with ``{param}``."""
    return _PATH_PARAM_RE.sub(r"{\1}", uri)


def swagger_uri_to_gin_uri(uri: str) -> str:
    """Replace path parameters with ``:param``."""
    return _PATH_PARAM_RE.sub(r":\1", uri)


def swagger_uri_to_gorilla_uri(uri: str) -> str:
    """Replace path parameters with ``{param}``."""
    return _PATH_PARAM_RE.sub(r"{\1}", uri)


def ordered_params_from_uri(uri: str) -> list[str]:
    """Return the path parameter names in the order they appear."""
    return _PATH_PARAM_RE.findall(uri)


def replace_path_params_with_str(uri: str) -> str:
    """Replace every path parameter with ``%s``."""
    return _PATH_PARAM_RE.sub("%s", uri)


def escape_path_elements(path: str) -> str:
    """Query-escape every path element that is not a ``{param}``."""
    return "/".join(
        element
        if element.startswith("{") and element.endswith("}")
        else quote_plus(element, safe="")
        for element in path.split("/")
    )


def sorted_keys(mapping: Mapping[str, object]) -> list[str]:
    """Return the keys of a mapping in sorted order."""
    return sorted(mapping)


def string_in_array(s: str, array: Iterable[str]) -> bool:
    """Report whether ``s`` is among ``array``."""
    return s in array
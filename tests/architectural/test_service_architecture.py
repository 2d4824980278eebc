"""Architectural tests for the storefront service.

Static, file/AST-based checks over `storefront/` plus contract checks over
the OpenAPI document generated by the application factory. They enforce the
layering (routes -> logic -> repositories -> db), the problem+json error
path and the REST surface the clients depend on.
"""

from __future__ import annotations

import ast
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[2]
PKG_DIR = PROJECT_ROOT / "storefront"
ROUTES_DIR = PKG_DIR / "routes"
LOGIC_DIR = PKG_DIR / "logic"
MODELS_DIR = PKG_DIR / "models"
MIGRATIONS_DIR = PROJECT_ROOT / "migrations"


# --------------------
# Helper utilities
# --------------------


def _iter_py_files(root: Path) -> Iterable[Path]:
    """Yield Python source files under a root directory."""
    for path in sorted(root.rglob("*.py")):
        if "__pycache__" in path.parts:
            continue
        yield path


def _parse_ast(path: Path) -> ast.AST:
    try:
        return ast.parse(path.read_text(encoding="utf-8"))
    except SyntaxError as exc:
        pytest.fail(f"Syntax error in {path}: {exc}")


def _imported_modules(tree: ast.AST) -> List[str]:
    names: List[str] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            names.extend(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module:
            names.append(node.module)
    return names


def _called_names(tree: ast.AST) -> List[str]:
    names: List[str] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Call):
            fn = node.func
            if isinstance(fn, ast.Name):
                names.append(fn.id)
            elif isinstance(fn, ast.Attribute):
                names.append(fn.attr)
    return names


_SQL_PATTERN = re.compile(r"^\s*(SELECT|INSERT|UPDATE|DELETE)\s")


def _sql_literals(tree: ast.AST) -> List[str]:
    return [
        n.value
        for n in ast.walk(tree)
        if isinstance(n, ast.Constant) and isinstance(n.value, str) and _SQL_PATTERN.search(n.value)
    ]


@pytest.fixture(scope="module")
def openapi() -> Dict[str, Any]:
    from storefront.main import create_app

    return create_app(enable_test_routes=False).openapi()


# --------------------
# Layering
# --------------------


def test_routes_issue_no_sql() -> None:
    offenders = []
    for path in _iter_py_files(ROUTES_DIR):
        if path.name == "test_support.py":
            continue
        tree = _parse_ast(path)
        if "sql_text" in _called_names(tree) or _sql_literals(tree):
            offenders.append(path.name)
        if any(m.startswith("sqlalchemy") for m in _imported_modules(tree)):
            offenders.append(path.name)
    assert offenders == [], f"Route modules must delegate SQL to repositories: {offenders}"


def test_logic_and_models_are_framework_free() -> None:
    offenders = []
    for root in (LOGIC_DIR, MODELS_DIR):
        for path in _iter_py_files(root):
            mods = _imported_modules(_parse_ast(path))
            if any(m.split(".")[0] in {"fastapi", "starlette"} for m in mods):
                offenders.append(str(path.relative_to(PROJECT_ROOT)))
    assert offenders == [], f"HTTP framework imported outside routes/http/guards: {offenders}"


def test_models_do_not_touch_the_database() -> None:
    for path in _iter_py_files(MODELS_DIR):
        mods = _imported_modules(_parse_ast(path))
        assert not any(m.startswith("sqlalchemy") or m.startswith("storefront.db") for m in mods), path.name


def test_sql_lives_only_in_repositories_and_db() -> None:
    allowed_logic = {p.name for p in LOGIC_DIR.glob("repository_*.py")}
    offenders = []
    for path in _iter_py_files(LOGIC_DIR):
        if path.name in allowed_logic:
            continue
        if _sql_literals(_parse_ast(path)):
            offenders.append(path.name)
    assert offenders == [], f"SQL literals outside repositories: {offenders}"


def test_routes_do_not_build_error_responses() -> None:
    for path in _iter_py_files(ROUTES_DIR):
        tree = _parse_ast(path)
        for node in ast.walk(tree):
            if isinstance(node, ast.Raise) and isinstance(node.exc, ast.Call):
                fn = node.exc.func
                name = fn.id if isinstance(fn, ast.Name) else getattr(fn, "attr", "")
                assert name != "HTTPException", f"{path.name}:{node.lineno} raises HTTPException directly"


def test_no_print_statements_in_package() -> None:
    for path in _iter_py_files(PKG_DIR):
        assert "print" not in _called_names(_parse_ast(path)), f"print() in {path.relative_to(PROJECT_ROOT)}"


def test_migrations_are_ordered_sql_files() -> None:
    files = sorted(p.name for p in MIGRATIONS_DIR.glob("*.sql"))
    assert files, "No migrations found"
    assert all(re.match(r"^\d{3}_[a-z0-9_]+\.sql$", f) for f in files), files


# --------------------
# OpenAPI contract
# --------------------


EXPECTED_OPERATIONS = {
    ("/rest/user/login", "post"): "login",
    ("/rest/user/whoami", "get"): "whoami",
    ("/rest/user/logout", "post"): "logout",
    ("/rest/image-captcha", "get"): "getImageCaptcha",
    ("/rest/user/data-export", "post"): "exportUserData",
    ("/rest/basket/{basket_id}", "get"): "getBasket",
    ("/rest/basket/{basket_id}/checkout", "post"): "checkoutBasket",
}


def test_openapi_exposes_expected_operations(openapi) -> None:
    paths = openapi.get("paths", {})
    for (path, method), operation_id in EXPECTED_OPERATIONS.items():
        assert path in paths, f"Missing path {path}"
        op = paths[path].get(method)
        assert op is not None, f"Missing {method.upper()} {path}"
        assert op.get("operationId") == operation_id


def test_openapi_hides_test_support_and_health(openapi) -> None:
    paths = set(openapi.get("paths", {}))
    assert not any(p.startswith("/__test__") for p in paths)
    assert "/health" not in paths
    assert all(p.startswith("/rest/") for p in paths), paths


def test_data_export_contract(openapi) -> None:
    op = openapi["paths"]["/rest/user/data-export"]["post"]
    assert {"200", "400", "401"} <= set(op["responses"])

    schemas = openapi["components"]["schemas"]
    request = schemas["DataExportRequest"]
    assert request.get("required") == ["format"]
    assert set(request["properties"]) == {"format", "answer"}

    response = schemas["DataExportResponse"]
    assert set(response["properties"]) == {"confirmation", "userData"}

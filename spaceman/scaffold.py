"""Source scaffolding for new workspaces, rendered with Jinja2.

Template variables:

- ``name``     : str -- package name, e.g. ``@web/ui``
- ``folder``   : str -- workspace folder, e.g. ``ui``
- ``function`` : str -- camel-cased folder, e.g. ``uiKit`` for ``ui-kit``
"""

from __future__ import annotations

import re

import jinja2

MAIN_TEMPLATE = """\
export function {{ function }} () {
  console.log('{{ name }}')
}
"""

DEFAULT_TEST_SCRIPT = 'echo "Error: no test specified" && exit 1'

_env = jinja2.Environment(autoescape=False, keep_trailing_newline=True)  # noqa: S701


def to_camel(value: str) -> str:
    """``my-ui.kit`` -> ``myUiKit``."""
    value = re.sub(r"^\W+|\W$", "", value)
    return re.sub(r"\W+(\w)", lambda m: m.group(1).upper(), value)


def render_main_file(name: str, folder: str, template: str = MAIN_TEMPLATE) -> str:
    return _env.from_string(template).render(name=name, folder=folder, function=to_camel(folder))


def default_main_file(has_typescript: bool) -> str:
    return f"index.{'ts' if has_typescript else 'js'}"


def build_manifest(
    *,
    name: str,
    description: str = "",
    main: str = "",
    dev: str = "",
    build: str = "",
    test: str = "",
) -> dict:
    """Manifest for a new workspace.  Empty ``dev`` / ``build`` scripts are left out."""
    data: dict = {
        "name": name,
        "description": description,
        "version": "0.0.0",
        "private": True,
    }
    if main:
        data["main"] = main
    scripts = {"dev": dev, "build": build}
    data["scripts"] = {key: value for key, value in scripts.items() if value}
    data["scripts"]["test"] = test or DEFAULT_TEST_SCRIPT
    return data

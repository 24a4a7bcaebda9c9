"""Modèle Jinja2 des scripts OpenRC générés.

Les clauses optionnelles sont omises quand la valeur est vide : le
script ne contient jamais ``command_args=""`` ni ``command_user=""``.
Les lignes vides en trop sont retirées par le convertisseur.
"""

from functools import lru_cache
from typing import Any, Mapping

from jinja2 import Environment, StrictUndefined, Template

# Suffixe des commandes de pré-démarrage dont l'échec est toléré
IGNORE_FAILURE_SUFFIX = " || true"

OPENRC_TEMPLATE = """\
#!/sbin/openrc-run
{% if source_path %}
# Generated by systemctl-openrc from {{ source_path }}
{% endif %}
{% if instance_name %}
# Instance: {{ instance_name }}
{% endif %}

name="{{ name }}"
{% if description %}
description={{ description | sq }}
{% endif %}
command="{{ command }}"
{% if command_args %}
command_args="{{ command_args | dq }}"
{% endif %}
{% if command_background %}
command_background=true
pidfile="/run/{{ name }}.pid"
{% endif %}
{% if user %}
command_user="{{ user ~ (':' ~ group if group else '') }}"
{% endif %}
{% if working_directory %}
directory="{{ working_directory }}"
{% endif %}
{% if capabilities %}
capabilities="{{ capabilities }}"
{% endif %}

depend() {
	use net logger
}
{% if environment_file or environment or exec_start_pre_commands %}

start_pre() {
{% if environment_file %}
	if [ -f "{{ environment_file }}" ]; then
		set -a
		. "{{ environment_file }}"
		set +a
	fi
{% endif %}
{% for assignment in environment %}
{% set key, _sep, value = assignment.partition("=") %}
	export {{ key }}={{ value | sq }}
{% endfor %}
{% for cmd in exec_start_pre_commands %}
	{{ cmd if cmd is tolerant else cmd ~ " || return 1" }}
{% endfor %}
}
{% endif %}
{% if stop_command %}

stop() {
	ebegin "Stopping ${RC_SVCNAME}"
	{{ stop_command }}
	eend $?
}
{% endif %}
"""


def double_quote_escape(value: str) -> str:
    """Échappe une valeur destinée à une chaîne shell entre ``"``."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def single_quote(value: str) -> str:
    """Entoure une valeur de ``'`` pour que le shell la prenne telle quelle.

    Ni ``$`` ni les backquotes ne sont interprétés ; un ``'`` interne
    est écrit ``'\\''``.
    """
    return "'" + value.replace("'", "'\\''") + "'"


def is_tolerant(command: str) -> bool:
    """True si l'échec de la commande est ignoré (``|| true``)."""
    return command.endswith(IGNORE_FAILURE_SUFFIX)


def create_environment() -> Environment:
    """Environnement Jinja2 strict utilisé pour les scripts.

    Une variable absente du contexte lève une erreur au rendu au
    lieu de produire une chaîne vide.
    """
    env = Environment(
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        autoescape=False,  # nosec B701 (scripts shell, pas de HTML)
    )
    env.filters["dq"] = double_quote_escape
    env.filters["sq"] = single_quote
    env.tests["tolerant"] = is_tolerant
    return env


@lru_cache(maxsize=1)
def get_template() -> Template:
    """Modèle compilé, partagé entre les conversions."""
    return create_environment().from_string(OPENRC_TEMPLATE)


def render_template(context: Mapping[str, Any]) -> str:
    """Rend le script OpenRC brut (avant nettoyage des lignes vides).

    Raises:
        jinja2.TemplateError: Si le contexte est incomplet.
    """
    return get_template().render(**context)

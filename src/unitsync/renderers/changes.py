"""Changes summary renderer: pending enable/disable and start/stop per modified service."""

from typing import Dict, List

from jinja2 import Environment

from ..schema import ServiceRecord

TEMPLATE = """\
{% if enable %}Services to enable: {{ enable | join(", ") }}
{% endif %}
{% if disable %}Services to disable: {{ disable | join(", ") }}
{% endif %}
{% if start %}Services to start: {{ start | join(", ") }}
{% endif %}
{% if stop %}Services to stop: {{ stop | join(", ") }}
{% endif %}
"""


def render(services: Dict[str, ServiceRecord], env: Environment) -> str:
    """Return the summary text, or "" when no service is modified."""
    enable: List[str] = []
    disable: List[str] = []
    start: List[str] = []
    stop: List[str] = []
    for name in sorted(services):
        record = services[name]
        if not record.modified:
            continue
        (enable if record.enabled else disable).append(name)
        (start if record.active else stop).append(name)
    if not enable and not disable:
        return ""
    return env.from_string(TEMPLATE).render(
        enable=enable,
        disable=disable,
        start=start,
        stop=stop,
    )

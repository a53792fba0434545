from __future__ import annotations

from typing import Iterable

from ..config import ProxySite


def render_caddyfile(sites: Iterable[ProxySite]) -> str:
    blocks = []
    for site in sites:
        blocks.append(
            "\n".join(
                [
                    f"# {site.service.capitalize()} service",
                    f"{site.hostname} {{",
                    f"    reverse_proxy {site.upstream}",
                    "}",
                ]
            )
        )
    return "\n\n".join(blocks) + "\n"

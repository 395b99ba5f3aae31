"""
Image Report
============
Prints the `sizes` report: local images of the app and engine disk usage.

Equivalent shell:
    docker images | grep "react-app" | awk '{print $1":"$2" - "$7$8}'
    docker system df
"""
import logging

import docker
from docker.errors import APIError

logger = logging.getLogger(__name__)

_UNITS = ["B", "kB", "MB", "GB", "TB"]


def format_size(num_bytes) -> str:
    """Human-readable size using decimal units, like the docker CLI."""
    size = float(num_bytes or 0)
    if size < 1000:
        return f"{int(size)}B"
    for unit in _UNITS[1:-1]:
        size /= 1000
        if size < 1000:
            return f"{size:.1f}{unit}"
    return f"{size / 1000:.1f}{_UNITS[-1]}"


def collect_image_rows(client: docker.DockerClient, prefix: str) -> list[tuple[str, int]]:
    """Return ``(repo:tag, size_bytes)`` for every local tag containing ``prefix``."""
    rows = []
    for image in client.images.list():
        for ref in image.tags:
            if prefix in ref:
                rows.append((ref, image.attrs.get("Size", 0)))
    return sorted(rows)


def summarize_disk_usage(df: dict) -> list[tuple[str, int, int, int]]:
    """Reduce the /system/df payload to ``(type, total, active, size_bytes)`` rows."""
    images = df.get("Images") or []
    containers = df.get("Containers") or []
    volumes = df.get("Volumes") or []
    cache = df.get("BuildCache") or []

    image_size = df.get("LayersSize")
    if image_size is None:
        image_size = sum(i.get("Size", 0) for i in images)

    return [
        ("Images", len(images),
         sum(1 for i in images if i.get("Containers", 0) > 0),
         image_size),
        ("Containers", len(containers),
         sum(1 for c in containers if c.get("State") == "running"),
         sum(c.get("SizeRw", 0) or 0 for c in containers)),
        ("Local Volumes", len(volumes),
         sum(1 for v in volumes if (v.get("UsageData") or {}).get("RefCount", 0) > 0),
         sum(max((v.get("UsageData") or {}).get("Size", 0), 0) for v in volumes)),
        ("Build Cache", len(cache),
         sum(1 for b in cache if b.get("InUse")),
         sum(b.get("Size", 0) for b in cache)),
    ]


def render_image_sizes(rows: list[tuple[str, int]], prefix: str) -> str:
    if not rows:
        return f"No {prefix} images found"
    return "\n".join(f"{ref} - {format_size(size)}" for ref, size in rows)


def render_disk_usage(summary: list[tuple[str, int, int, int]]) -> str:
    lines = [f"{'TYPE':<15}{'TOTAL':<8}{'ACTIVE':<8}SIZE"]
    for kind, total, active, size in summary:
        lines.append(f"{kind:<15}{total:<8}{active:<8}{format_size(size)}")
    return "\n".join(lines)


def show_image_sizes(client: docker.DockerClient, prefix: str) -> None:
    print("")
    logger.info("Docker Image Sizes:")
    print("====================")
    try:
        print(render_image_sizes(collect_image_rows(client, prefix), prefix))
    except APIError as e:
        logger.warning("Could not list images: %s", e)
        print(f"No {prefix} images found")
    print("")
    logger.info("Docker System Usage:")
    try:
        print(render_disk_usage(summarize_disk_usage(client.df())))
    except APIError as e:
        logger.warning("Could not read disk usage: %s", e)
    print("")

"""Host CPU and memory readings, taken fresh on every export tick."""

import psutil

from pizzeria.logging import get_logger

log = get_logger("pizzeria.metrics.sampler")


def cpu_load_percent() -> float:
    """1-minute load average per logical core, as a percentage.

    Returns 0.0 when the platform cannot report load or core count.
    """
    try:
        load_1m = psutil.getloadavg()[0]
        cores = psutil.cpu_count(logical=True)
    except (OSError, AttributeError) as e:
        log.debug("cpu_sample_unavailable", error=str(e))
        return 0.0
    if not cores:
        return 0.0
    return round(load_1m / cores * 100, 2)


def memory_usage_percent() -> float:
    """Used (total - free) over total memory, as a percentage."""
    try:
        mem = psutil.virtual_memory()
    except (OSError, RuntimeError) as e:
        log.debug("memory_sample_unavailable", error=str(e))
        return 0.0
    if not mem.total:
        return 0.0
    return round((mem.total - mem.free) / mem.total * 100, 2)

from __future__ import annotations

import logging
import platform
from typing import Dict

import cpuinfo
import psutil


def collect_specs() -> Dict[str, str]:
    cpu = cpuinfo.get_cpu_info()
    os_name = f"{platform.system()} {platform.release()}".strip()
    return {
        "OS": os_name,
        "CPU": cpu.get("brand_raw", "Unknown CPU"),
        "Cores": str(cpu.get("count") or psutil.cpu_count() or "unknown"),
        "RAM": f"{psutil.virtual_memory().total / 1024 ** 3:.2f} GB",
    }


def log_computer_specs() -> Dict[str, str]:
    """
    Log the current host specifications and return them.
    """
    specs = collect_specs()
    logging.info("Computer Specs:")
    for key, value in specs.items():
        logging.info("%s: %s", key, value)
    return specs

# src/vpsprep/provision/detect.py

from __future__ import annotations

import logging

from .commands import OSFamily

log = logging.getLogger("vpsprep")

OS_PROBE = "grep -E '^NAME=' /etc/os-release"


def classify(probe_output: str) -> OSFamily:
    # empty or unrecognised output falls through to RHEL
    return OSFamily.UBUNTU if "Ubuntu" in probe_output else OSFamily.RHEL


def detect_os_family(runner) -> OSFamily:
    _, out = runner.run(OS_PROBE)
    family = classify(out)
    log.debug("OS probe returned %r -> %s", out.strip(), family.value)
    return family

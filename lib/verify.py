"""Post-run audit of the artifacts a hardening run writes.

Each check reads the live host state and reports pass/fail without
changing anything, so it is safe to run at any time (``--verify``).
"""

from __future__ import annotations

import json
import os
import re
import stat
from dataclasses import dataclass

import yaml

from lib.config import HardeningConfig
from lib.desired_state import printable
from lib.machine_state import can_modify_kernel
from lib.system_utils import get_group_id, read_file

from container.docker_steps import DAEMON_JSON, DAEMON_SETTINGS
from container.service_steps import SERVICE_DIR_MODE, SERVICE_SUBDIRS, generate_compose_manifest
from security.kernel_steps import SYSCTL_SETTINGS
from security import ssh_steps


@dataclass
class CheckResult:
    name: str
    passed: bool
    detail: str = ""


def check_sshd_config(config: HardeningConfig) -> CheckResult:
    name = "SSH daemon config"
    content = read_file(ssh_steps.SSHD_CONFIG)
    if content is None:
        return CheckResult(name, False, f"{ssh_steps.SSHD_CONFIG} not found")

    global_lines = []
    for line in content.splitlines():
        if re.match(r"^\s*Match\s", line, re.IGNORECASE):
            break
        global_lines.append(line.strip())

    problems = []
    for key, value in ssh_steps.get_ssh_settings(config):
        active = [line for line in global_lines
                  if re.match(rf"^{re.escape(key)}(\s|=)", line, re.IGNORECASE)]
        if active != [f"{key} {value}"]:
            problems.append(f"expected one '{key} {value}', found {active or 'none'}")
    if problems:
        return CheckResult(name, False, "; ".join(problems))
    return CheckResult(name, True, "password auth off, root login off, port set")


def check_sysctl_conf(config: HardeningConfig) -> CheckResult:
    name = "Kernel sysctl drop-in"
    if not can_modify_kernel(config.machine_type):
        return CheckResult(name, True, f"skipped on {config.machine_type} machines")
    content = read_file(config.sysctl_conf_path)
    if content is None:
        return CheckResult(name, False, f"{config.sysctl_conf_path} not found")

    pairs = []
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith(("#", ";")):
            continue
        key, _, value = line.partition("=")
        pairs.append((key.strip(), value.strip()))

    if sorted(pairs) != sorted(SYSCTL_SETTINGS):
        return CheckResult(name, False, f"unexpected settings: {pairs}")
    return CheckResult(name, True, f"{len(pairs)} settings")


def check_daemon_json(config: HardeningConfig) -> CheckResult:
    name = "Docker daemon config"
    content = read_file(DAEMON_JSON)
    if content is None:
        return CheckResult(name, False, f"{DAEMON_JSON} not found")
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        return CheckResult(name, False, f"invalid JSON: {e}")

    wrong = [key for key, value in DAEMON_SETTINGS.items()
             if not isinstance(data, dict) or data.get(key) != value]
    if wrong:
        return CheckResult(name, False, f"wrong or missing keys: {', '.join(wrong)}")
    return CheckResult(name, True, ", ".join(DAEMON_SETTINGS))


def check_service_directory(config: HardeningConfig) -> CheckResult:
    name = "Service directory"
    gid = get_group_id(config.runtime_group)
    if gid is None:
        return CheckResult(name, False, f"group '{config.runtime_group}' does not exist")

    problems = []
    for path in [config.service_dir] + [os.path.join(config.service_dir, sub) for sub in SERVICE_SUBDIRS]:
        try:
            st = os.stat(path)
        except FileNotFoundError:
            problems.append(f"{path} missing")
            continue
        if not stat.S_ISDIR(st.st_mode):
            problems.append(f"{path} is not a directory")
        if stat.S_IMODE(st.st_mode) != SERVICE_DIR_MODE:
            problems.append(f"{path} mode {stat.S_IMODE(st.st_mode):o}")
        if st.st_uid != 0 or st.st_gid != gid:
            problems.append(f"{path} owned by {st.st_uid}:{st.st_gid}")
    if problems:
        return CheckResult(name, False, "; ".join(problems))
    return CheckResult(name, True, f"root:{config.runtime_group} 750")


def check_compose_manifest(config: HardeningConfig) -> CheckResult:
    name = "docker-compose manifest"
    content = read_file(config.compose_path)
    if content is None:
        return CheckResult(name, False, f"{config.compose_path} not found")
    try:
        manifest = yaml.safe_load(content)
    except yaml.YAMLError as e:
        return CheckResult(name, False, f"invalid YAML: {e}")

    services = manifest.get("services") if isinstance(manifest, dict) else None
    if not isinstance(services, dict) or list(services) != [config.service_name]:
        return CheckResult(name, False, f"expected exactly one service '{config.service_name}'")

    expected = yaml.safe_load(generate_compose_manifest(config))
    service = services[config.service_name]
    drift = sorted(key for key in set(service) | set(expected["services"][config.service_name])
                   if service.get(key) != expected["services"][config.service_name].get(key))
    if drift:
        return CheckResult(name, False, f"fields differ: {', '.join(drift)}")
    if content != generate_compose_manifest(config):
        return CheckResult(name, False, "content matches but formatting differs")
    return CheckResult(name, True, "one hardened service")


CHECKS = [
    check_sshd_config,
    check_sysctl_conf,
    check_daemon_json,
    check_service_directory,
    check_compose_manifest,
]


def verify_host(config: HardeningConfig) -> list[CheckResult]:
    return [check(config) for check in CHECKS]


def print_verification(results: list[CheckResult]) -> bool:
    for result in results:
        mark = "✓" if result.passed else "✗"
        print(f"  {mark} {result.name}: {printable(result.detail)}")
    passed = sum(1 for result in results if result.passed)
    print(f"\n{passed}/{len(results)} checks passed")
    return passed == len(results)

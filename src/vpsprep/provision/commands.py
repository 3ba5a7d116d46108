# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vpsprep/provision/commands.py

from __future__ import annotations

import textwrap
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from jinja2 import Environment, StrictUndefined


class OSFamily(str, Enum):
    UBUNTU = "ubuntu"
    RHEL = "rhel"


@dataclass(frozen=True)
class CommandBlock:
    """
    A named shell script with an Ubuntu and a RHEL/CentOS variant.
    ``rhel=None`` means the Ubuntu text is used on both families.

    The only template variable is ``user``. It is substituted verbatim,
    without shell quoting, so it must come from trusted configuration.
    """
    name: str
    ubuntu: str
    rhel: Optional[str] = None

    def variant(self, family: OSFamily) -> str:
        if family is OSFamily.RHEL and self.rhel is not None:
            return self.rhel
        return self.ubuntu


def _script(text: str) -> str:
    return textwrap.dedent(text).strip() + "\n"


ESSENTIALS = CommandBlock(
    name="essentials",
    ubuntu=_script("""
        apt-get update -y
        DEBIAN_FRONTEND=noninteractive apt-get install -y docker.io curl unattended-upgrades
    """),
    rhel=_script("""
        yum install -y yum-utils curl yum-cron
        yum-config-manager --add-repo https://download.docker.com/linux/centos/docker-ce.repo
        yum install -y docker-ce docker-ce-cli containerd.io
        systemctl enable --now docker
    """),
)

SWAP = CommandBlock(
    name="swap",
    ubuntu=_script("""
        fallocate -l 2G /swapfile
        chmod 600 /swapfile
        mkswap /swapfile
        swapon /swapfile
        echo '/swapfile none swap sw 0 0' >> /etc/fstab
        sysctl vm.swappiness=20
        echo 'vm.swappiness=20' >> /etc/sysctl.conf
    """),
    rhel=_script("""
        dd if=/dev/zero of=/swapfile bs=1M count=2048
        chmod 600 /swapfile
        mkswap /swapfile
        swapon /swapfile
        echo '/swapfile none swap sw 0 0' >> /etc/fstab
        sysctl vm.swappiness=20
        echo 'vm.swappiness=20' >> /etc/sysctl.conf
    """),
)

# uid/gid 1000 is what the deploy user receives when add_user runs later
STORAGE = CommandBlock(
    name="storage",
    ubuntu=_script("""
        mkdir -p /storage
        chmod 700 /storage
        chown 1000:1000 /storage
    """),
)

ADD_USER = CommandBlock(
    name="user",
    ubuntu=_script("""
        useradd --create-home {{ user }}
        usermod -s /bin/bash {{ user }}
        mkdir -p /home/{{ user }}/.ssh
        touch /home/{{ user }}/.ssh/authorized_keys
        cat /root/.ssh/authorized_keys >> /home/{{ user }}/.ssh/authorized_keys
        chown -R {{ user }}:{{ user }} /home/{{ user }}/.ssh
        chmod 700 /home/{{ user }}/.ssh
        chmod 600 /home/{{ user }}/.ssh/authorized_keys
        echo '{{ user }} ALL=(ALL) NOPASSWD:ALL' > /tmp/sudoers.{{ user }}
        visudo -cf /tmp/sudoers.{{ user }} && install -m 0440 /tmp/sudoers.{{ user }} /etc/sudoers.d/{{ user }}
        rm -f /tmp/sudoers.{{ user }}
        usermod -aG docker {{ user }}
    """),
)

FAIL2BAN = CommandBlock(
    name="fail2ban",
    ubuntu=_script("""
        DEBIAN_FRONTEND=noninteractive apt-get install -y fail2ban
        systemctl start fail2ban
        systemctl enable fail2ban
    """),
    rhel=_script("""
        yum install -y epel-release
        yum install -y fail2ban
        systemctl enable --now fail2ban
    """),
)

# ufw only; RHEL hosts get the same text and no firewalld rules
FIREWALL = CommandBlock(
    name="firewall",
    ubuntu=_script("""
        ufw logging on
        ufw default deny incoming
        ufw default allow outgoing
        ufw allow 22
        ufw allow 80
        ufw allow 443
        ufw --force enable
        systemctl restart ufw
    """),
)

UNATTENDED_UPGRADES = CommandBlock(
    name="unattended_upgrades",
    ubuntu=_script("""
        printf 'APT::Periodic::Update-Package-Lists "1";\\nAPT::Periodic::Unattended-Upgrade "1";\\n' > /etc/apt/apt.conf.d/20auto-upgrades
        systemctl restart unattended-upgrades
    """),
)

DISABLE_ROOT = CommandBlock(
    name="disable_root",
    ubuntu=_script("""
        sed -i 's/^#\\?PasswordAuthentication.*/PasswordAuthentication no/' /etc/ssh/sshd_config
        sed -i 's/^#\\?PermitRootLogin.*/PermitRootLogin no/' /etc/ssh/sshd_config
        systemctl restart ssh || systemctl restart sshd
    """),
)

BLOCKS: Dict[str, CommandBlock] = {
    b.name: b
    for b in (
        ESSENTIALS,
        SWAP,
        STORAGE,
        ADD_USER,
        FAIL2BAN,
        FIREWALL,
        UNATTENDED_UPGRADES,
        DISABLE_ROOT,
    )
}

_env = Environment(autoescape=False, undefined=StrictUndefined, keep_trailing_newline=True)


def render(block: CommandBlock, family: OSFamily, user: str) -> str:
    return _env.from_string(block.variant(family)).render(user=user)
